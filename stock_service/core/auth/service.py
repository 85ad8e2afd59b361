"""Authentication service for registration and login."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stock_service.config import Settings
from stock_service.core.auth.security import (
    TokenPair,
    create_tokens,
    get_access_secret,
    get_password_hash,
    get_refresh_secret,
    verify_password,
)
from stock_service.core.users.repository import UserRepository
from stock_service.db.models import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class RegistrationError(ValueError):
    """Registration input was rejected."""


class EmailAlreadyRegisteredError(RegistrationError):
    """Another user already owns the email address."""


class AuthenticationError(ValueError):
    """Credentials did not match a user."""


@dataclass
class Registration:
    """Registration form as submitted by the client."""

    first_name: str
    last_name: str
    email: str
    password: str
    password2: str
    timezone: str = ""
    profile_image_url: str = ""


class AuthService:
    """Service for user authentication and registration."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.users = UserRepository(db)

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address."""
        return self.users.get_by_email(email)

    def register(self, form: Registration) -> Tuple[User, TokenPair]:
        """Register a new user.

        Checks run in order and all of them pass before anything is written:
        required fields, password confirmation, email availability.

        Args:
            form: The submitted registration form

        Returns:
            Tuple of (user, token pair)

        Raises:
            RegistrationError: If a field is missing or passwords differ
            EmailAlreadyRegisteredError: If the email is taken
            TokenConfigError: If a signing secret is not configured
        """
        required = (form.first_name, form.last_name, form.email, form.password, form.password2)
        if not all(required):
            raise RegistrationError("Please fill in all fields")

        if form.password != form.password2:
            raise RegistrationError("Passwords do not match")

        if self.get_user_by_email(form.email):
            raise EmailAlreadyRegisteredError(f"User {form.email} already exists")

        # Fail on missing secrets before the insert
        get_access_secret(self.settings)
        get_refresh_secret(self.settings)

        user = User(
            first_name=form.first_name,
            last_name=form.last_name,
            email=form.email,
            password=get_password_hash(form.password),
            timezone=form.timezone or "",
            profile_image_url=form.profile_image_url or "",
        )
        try:
            self.users.create(user)
        except IntegrityError:
            # Lost the race against a concurrent registration
            self.db.rollback()
            raise EmailAlreadyRegisteredError(f"User {form.email} already exists")

        logger.info(f"Registered user {user.id} ({user.email})")
        return user, create_tokens(user.id, user.email, self.settings)

    def login(self, email: str, password: str) -> Tuple[User, TokenPair]:
        """Authenticate a user and issue tokens.

        Unknown emails and wrong passwords raise the same error.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Tuple of (user, token pair)

        Raises:
            AuthenticationError: If credentials are invalid
            TokenConfigError: If a signing secret is not configured
        """
        user = self.get_user_by_email(email)
        if not user or not verify_password(password, user.password):
            logger.debug(f"Login rejected for {email}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        return user, create_tokens(user.id, user.email, self.settings)


def get_auth_service(db: Session, settings: Settings) -> AuthService:
    """Factory function to get an AuthService instance."""
    return AuthService(db, settings)
