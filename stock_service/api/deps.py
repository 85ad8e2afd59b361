"""FastAPI dependencies."""

from __future__ import annotations

import logging
from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from stock_service.config import Settings
from stock_service.core.auth.security import (
    TokenConfigError,
    TokenValidationError,
    decode_access_token,
    extract_bearer_token,
)
from stock_service.db.database import get_db as db_context

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a database session from the app's session factory."""
    with db_context(request.app.state.session_factory) as db:
        yield db


def require_auth(
    request: Request,
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Validate the bearer access token of a protected request.

    On success the identity and email are stored on `request.state`.

    Returns:
        Decoded access token claims
    """
    try:
        token = extract_bearer_token(authorization)
        claims = decode_access_token(token, settings)
    except TokenValidationError as e:
        logger.debug(f"Rejected {request.method} {request.url.path}: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except TokenConfigError as e:
        logger.error(f"Cannot validate tokens: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server authentication is not configured",
        )

    request.state.user_id = claims["_id"]
    request.state.email = claims.get("email")
    return claims
