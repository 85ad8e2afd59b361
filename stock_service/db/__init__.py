"""Database module."""

from .database import create_db_engine, create_session_factory, get_db, init_db
from .models import Base, User, Holding

__all__ = [
    "create_db_engine",
    "create_session_factory",
    "get_db",
    "init_db",
    "Base",
    "User",
    "Holding",
]
