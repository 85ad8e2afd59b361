"""Web index route."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from stock_service.api.catalogue import TEMPLATES_DIR, get_routes
from stock_service.config import PRODUCT_NAME, PRODUCT_VERSION

router = APIRouter()

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(request: Request):
    """Render the list of API routes."""
    return templates.TemplateResponse(
        "index.html",
        {
            "request": request,
            "name": PRODUCT_NAME,
            "version": PRODUCT_VERSION,
            "routes": get_routes(request.app),
        },
    )
