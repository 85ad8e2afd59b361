"""Route catalogue for the index page and the generated README."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from fastapi import FastAPI
from fastapi.routing import APIRoute
from jinja2 import Environment, FileSystemLoader

from stock_service.api.deps import require_auth
from stock_service.config import PRODUCT_DESCRIPTION, PRODUCT_NAME, PRODUCT_VERSION

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

# Static mounts are not part of the API
STATIC_PREFIXES = ("/css", "/js", "/images")


@dataclass
class RouteInfo:
    """One documented API route."""

    method: str
    path: str
    description: str
    requires_auth: bool


def _requires_auth(route: APIRoute) -> bool:
    return any(dep.dependency is require_auth for dep in route.dependencies)


def _description(route: APIRoute) -> str:
    text = (route.description or route.summary or route.name or "").strip()
    return text.splitlines()[0] if text else ""


def get_routes(app: FastAPI) -> List[RouteInfo]:
    """Describe every API route of the app, one entry per method."""
    routes: List[RouteInfo] = []
    for route in app.routes:
        if not isinstance(route, APIRoute) or not route.include_in_schema:
            continue
        if route.path.startswith(STATIC_PREFIXES):
            continue
        for method in sorted(route.methods):
            routes.append(
                RouteInfo(
                    method=method,
                    path=route.path,
                    description=_description(route),
                    requires_auth=_requires_auth(route),
                )
            )
    return routes


def render_readme(app: FastAPI) -> str:
    """Render README.md contents from the route catalogue."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        keep_trailing_newline=True,
    )
    template = env.get_template("README.md.j2")
    return template.render(
        name=PRODUCT_NAME,
        version=PRODUCT_VERSION,
        description=PRODUCT_DESCRIPTION,
        routes=get_routes(app),
    )


def write_readme(app: FastAPI, output: Path) -> Path:
    """Write the generated README to `output`."""
    output.write_text(render_readme(app), encoding="utf-8")
    return output
