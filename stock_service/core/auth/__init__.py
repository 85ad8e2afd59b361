"""Authentication module."""

from .service import (
    AuthService,
    AuthenticationError,
    EmailAlreadyRegisteredError,
    Registration,
    RegistrationError,
    get_auth_service,
)
from .security import (
    TokenClaims,
    TokenConfigError,
    TokenPair,
    TokenValidationError,
    create_tokens,
    decode_access_token,
    extract_bearer_token,
    get_password_hash,
    verify_password,
)

__all__ = [
    "AuthService",
    "AuthenticationError",
    "EmailAlreadyRegisteredError",
    "Registration",
    "RegistrationError",
    "get_auth_service",
    "TokenClaims",
    "TokenConfigError",
    "TokenPair",
    "TokenValidationError",
    "create_tokens",
    "decode_access_token",
    "extract_bearer_token",
    "get_password_hash",
    "verify_password",
]
