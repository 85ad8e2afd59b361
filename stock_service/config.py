"""Application configuration using Pydantic Settings."""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings

# ===========================================
# Product Branding
# ===========================================
PRODUCT_NAME = "Stock Service"
PRODUCT_TAGLINE = "Holdings and users behind a bearer token."
PRODUCT_VERSION = "1.0.0"
PRODUCT_DESCRIPTION = "Track portfolio holdings per account and ticker."

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (the URL carries the database name)
    database_url: str = "sqlite:///./stock_service.db"
    db_timeout_seconds: int = 30

    # Token signing secrets
    access_token_secret: str = ""
    refresh_token_secret: str = ""

    # Static files served at /css, /js and /images
    public_files_path: str = "./public"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Logging
    log_level: str = "INFO"

    # Legacy API compatibility: echo the password hash from login/register
    expose_password_hash: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the server and the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("passlib").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
