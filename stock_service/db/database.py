"""SQLAlchemy database configuration and session management."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from stock_service.config import Settings


def create_db_engine(settings: Settings) -> Engine:
    """Create an engine whose operations are bounded by the configured timeout."""
    if settings.database_url.startswith("sqlite"):
        return create_engine(
            settings.database_url,
            connect_args={
                "check_same_thread": False,  # Needed for SQLite
                "timeout": settings.db_timeout_seconds,
            },
            echo=False,  # Set to True for SQL debugging
        )

    return create_engine(
        settings.database_url,
        pool_timeout=settings.db_timeout_seconds,
        pool_pre_ping=True,
        echo=False,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Build the session factory handed to the app and the CLI."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,  # Allow accessing attributes after commit/close
    )


@contextmanager
def get_db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Context manager for database sessions.

    Usage:
        with get_db(session_factory) as db:
            db.query(User).all()
    """
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(engine: Engine) -> None:
    """Initialize database tables."""
    from .models import Base

    Base.metadata.create_all(bind=engine)
