"""User and authentication API routes."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from stock_service.api.deps import get_db, get_settings, require_auth
from stock_service.config import Settings
from stock_service.core.auth import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
    Registration,
    RegistrationError,
    TokenConfigError,
    get_auth_service,
    get_password_hash,
)
from stock_service.core.users import UserRepository, UserResponse, UserUpdate, user_response, users_from_records

logger = logging.getLogger(__name__)

router = APIRouter()


# Request Models

class LoginRequest(BaseModel):
    """User login request."""

    email: str
    password: str


class RegisterRequest(BaseModel):
    """User registration request."""

    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    email: str = ""
    password: str = ""
    password2: str = ""
    timezone: str = ""
    profile_image_url: Optional[str] = Field(None, alias="profileImageUrl")

    model_config = ConfigDict(populate_by_name=True)


def _token_failure(e: TokenConfigError) -> HTTPException:
    logger.error(f"Token issuance failed: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Failed to create tokens",
    )


# Public Routes (no auth required)

@router.post("/login")
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Log in with email and password and receive tokens."""
    auth_service = get_auth_service(db, settings)

    try:
        user, tokens = auth_service.login(email=request.email, password=request.password)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except TokenConfigError as e:
        raise _token_failure(e)

    return {
        "response": {
            "success": True,
            "user": user_response(user, include_password=settings.expose_password_hash),
            "auth": {
                "accessToken": tokens.access_token,
                "refreshToken": tokens.refresh_token,
                "iat": tokens.access_claims.issued_at,
                "exp": tokens.access_claims.expires_at,
            },
        }
    }


@router.post("/register")
def register(
    request: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Register a new user account and receive tokens."""
    auth_service = get_auth_service(db, settings)

    form = Registration(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        password=request.password,
        password2=request.password2,
        timezone=request.timezone,
        profile_image_url=request.profile_image_url or "",
    )
    try:
        user, tokens = auth_service.register(form)
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except RegistrationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except TokenConfigError as e:
        raise _token_failure(e)
    except SQLAlchemyError:
        logger.exception("Failed to register user")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register user",
        )

    claims = tokens.access_claims
    return {
        "response": {
            "user": user_response(user, include_password=settings.expose_password_hash),
            "auth": {
                "accessToken": tokens.access_token,
                "refreshToken": tokens.refresh_token,
                "accessTokenProperties": {
                    "_id": claims.user_id,
                    "email": claims.email,
                    "iat": claims.issued_at,
                    "exp": claims.expires_at,
                },
            },
        }
    }


@router.put("/id/{user_id}")
def update_user(
    user_id: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
):
    """Replace a user record; the password is re-hashed."""
    if not all((payload.first_name, payload.last_name, payload.email, payload.password)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please fill in all fields",
        )

    repo = UserRepository(db)
    try:
        user = repo.replace(
            user_id,
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            password_hash=get_password_hash(payload.password),
            timezone=payload.timezone,
            profile_image_url=payload.profile_image_url,
        )
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"User {payload.email} already exists",
        )
    except SQLAlchemyError:
        logger.exception(f"Failed to update user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user",
        )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User ID: {user_id} not found",
        )
    return {"message": f"User {user_id} updated successfully!"}


# Protected Routes (auth required)

@router.get("/", dependencies=[Depends(require_auth)])
def list_users(db: Session = Depends(get_db)):
    """List all users."""
    try:
        users = users_from_records(UserRepository(db).get_all())
    except SQLAlchemyError:
        logger.exception("Failed to retrieve users")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve users",
        )
    return {"count": len(users), "users": users}


@router.get("/id/{user_id}", response_model=UserResponse, dependencies=[Depends(require_auth)])
def get_user(user_id: str, db: Session = Depends(get_db)):
    """Fetch a user by ID."""
    try:
        user = UserRepository(db).get_by_id(user_id)
    except SQLAlchemyError:
        logger.exception(f"Failed to retrieve user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve user",
        )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User ID: {user_id} not found",
        )
    return UserResponse.from_record(user)


@router.delete("/id/{user_id}", dependencies=[Depends(require_auth)])
def delete_user(user_id: str, db: Session = Depends(get_db)):
    """Delete a user by ID."""
    try:
        user = UserRepository(db).delete(user_id)
    except SQLAlchemyError:
        logger.exception(f"Failed to delete user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete user",
        )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User ID: {user_id} not found",
        )
    return {"message": f"User {user.email} deleted successfully!"}
