"""Shared database access for CLI commands."""

from contextlib import contextmanager
from functools import lru_cache
from typing import Generator

from sqlalchemy.orm import Session, sessionmaker

from stock_service.config import get_settings
from stock_service.db.database import create_db_engine, create_session_factory, get_db, init_db


@lru_cache
def get_session_factory() -> sessionmaker:
    """Build the session factory once per process and ensure tables exist."""
    engine = create_db_engine(get_settings())
    init_db(engine)
    return create_session_factory(engine)


@contextmanager
def cli_db() -> Generator[Session, None, None]:
    """Session context for a single command."""
    with get_db(get_session_factory()) as db:
        yield db
