"""FastAPI application setup."""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from stock_service.api.routes import holdings, users, web
from stock_service.config import PRODUCT_DESCRIPTION, PRODUCT_NAME, PRODUCT_VERSION, Settings, get_settings
from stock_service.db.database import create_db_engine, create_session_factory, init_db

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 with the offending field."""
    errors = exc.errors()
    message = "Invalid input data"
    if errors:
        error = errors[0]
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        if error.get("type") == "json_invalid":
            message = "Invalid JSON body"
        elif error.get("type") == "missing" and loc:
            message = f"Missing required field: {loc[-1]}"
        elif loc:
            message = f"Invalid value for field '{loc[-1]}': {error.get('msg')}"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and answer with a generic 500."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def _mount_static(app: FastAPI, base_path: str) -> None:
    base = Path(base_path)
    for name in ("css", "js", "images"):
        directory = base / name
        if directory.is_dir():
            app.mount(f"/{name}", StaticFiles(directory=str(directory)), name=name)


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    """Build the API application.

    Args:
        settings: Settings to run with (defaults to the environment)
        session_factory: Session factory to use instead of one built from
            `settings.database_url`

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    if session_factory is None:
        session_factory = create_session_factory(create_db_engine(settings))

    app = FastAPI(
        title=f"{PRODUCT_NAME} API",
        description=PRODUCT_DESCRIPTION,
        version=PRODUCT_VERSION,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    _mount_static(app, settings.public_files_path)

    @app.on_event("startup")
    def startup():
        """Initialize database on startup."""
        init_db(session_factory.kw["bind"])
        logger.info(f"{PRODUCT_NAME} {PRODUCT_VERSION} ready")

    # Mount API routers
    app.include_router(users.router, prefix="/users", tags=["users"])
    app.include_router(holdings.router, prefix="/holdings", tags=["holdings"])

    # Mount route index (no prefix - serves at root)
    app.include_router(web.router, tags=["index"])

    return app
