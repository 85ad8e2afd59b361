"""Security utilities for password hashing and JWT tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext

from stock_service.config import Settings

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# JWT settings
ALGORITHM = "HS256"
HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]
ACCESS_TOKEN_EXPIRE = timedelta(days=30)
REFRESH_TOKEN_EXPIRE = timedelta(days=7)

BEARER_PREFIX = "Bearer "


class TokenConfigError(RuntimeError):
    """A signing secret is missing from the configuration."""


class TokenValidationError(ValueError):
    """A bearer credential was rejected."""


@dataclass
class TokenClaims:
    """Claims carried by both access and refresh tokens."""

    user_id: str
    email: str
    issued_at: int
    expires_at: int

    def to_payload(self) -> dict:
        return {
            "_id": self.user_id,
            "email": self.email,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }


@dataclass
class TokenPair:
    """Signed access and refresh tokens for one identity."""

    access_token: str
    refresh_token: str
    access_claims: TokenClaims
    refresh_claims: TokenClaims


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: The plain text password
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password.

    Args:
        password: Plain text password

    Returns:
        Hashed password
    """
    return pwd_context.hash(password)


def get_access_secret(settings: Settings) -> str:
    if not settings.access_token_secret:
        raise TokenConfigError("ACCESS_TOKEN_SECRET not set")
    return settings.access_token_secret


def get_refresh_secret(settings: Settings) -> str:
    if not settings.refresh_token_secret:
        raise TokenConfigError("REFRESH_TOKEN_SECRET not set")
    return settings.refresh_token_secret


def _build_claims(user_id: str, email: str, issued_at: datetime, lifetime: timedelta) -> TokenClaims:
    iat = int(issued_at.timestamp())
    return TokenClaims(
        user_id=user_id,
        email=email,
        issued_at=iat,
        expires_at=iat + int(lifetime.total_seconds()),
    )


def create_tokens(
    user_id: str,
    email: str,
    settings: Settings,
    now: Optional[datetime] = None,
) -> TokenPair:
    """Create the access/refresh token pair for a user.

    Both secrets are resolved before anything is signed, so a missing secret
    never yields half a pair.

    Args:
        user_id: Identity placed in the `_id` claim
        email: User's email address
        settings: Settings holding the signing secrets
        now: Issuance instant (defaults to the current UTC time)

    Returns:
        TokenPair with both encoded tokens and their claims

    Raises:
        TokenConfigError: If either secret is not configured
    """
    access_secret = get_access_secret(settings)
    refresh_secret = get_refresh_secret(settings)

    issued_at = now or datetime.now(timezone.utc)
    access_claims = _build_claims(user_id, email, issued_at, ACCESS_TOKEN_EXPIRE)
    refresh_claims = _build_claims(user_id, email, issued_at, REFRESH_TOKEN_EXPIRE)

    return TokenPair(
        access_token=jwt.encode(access_claims.to_payload(), access_secret, algorithm=ALGORITHM),
        refresh_token=jwt.encode(refresh_claims.to_payload(), refresh_secret, algorithm=ALGORITHM),
        access_claims=access_claims,
        refresh_claims=refresh_claims,
    )


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an `Authorization: Bearer <token>` header."""
    if not authorization:
        raise TokenValidationError("No Authorization header provided")
    if not authorization.startswith(BEARER_PREFIX):
        raise TokenValidationError("Authorization header must use the Bearer scheme")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise TokenValidationError("No Authorization header provided")
    return token


def decode_access_token(token: str, settings: Settings) -> dict:
    """Decode and validate a JWT access token.

    Only HMAC-signed tokens are accepted; anything else is rejected before
    the signature is checked.

    Args:
        token: The JWT token to decode
        settings: Settings holding the access secret

    Returns:
        Decoded token payload

    Raises:
        TokenConfigError: If the access secret is not configured
        TokenValidationError: With one fixed message per failure kind
    """
    secret = get_access_secret(settings)

    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        raise TokenValidationError("Malformed token")

    algorithm = header.get("alg")
    if algorithm not in HMAC_ALGORITHMS:
        raise TokenValidationError(f"Unexpected signing method: {algorithm}")

    try:
        payload = jwt.decode(token, secret, algorithms=HMAC_ALGORITHMS)
    except ExpiredSignatureError:
        raise TokenValidationError("Token has expired")
    except JWTClaimsError:
        raise TokenValidationError("Invalid token claims")
    except JWTError:
        raise TokenValidationError("Invalid token signature")

    if not payload.get("_id"):
        raise TokenValidationError("Token is missing identity claim")
    return payload
