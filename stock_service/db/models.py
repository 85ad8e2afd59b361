"""SQLAlchemy ORM models."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_uuid() -> str:
    """Generate a new opaque identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """Registered user. Email is the login key."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    timezone = Column(String(64), nullable=False, default="")
    profile_image_url = Column(String(1024), nullable=False, default="")
    date = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class Holding(Base):
    """Portfolio holding model."""

    __tablename__ = "holdings"

    id = Column(String, primary_key=True, default=generate_uuid)
    ticker = Column(String(32), nullable=False, index=True)
    quantity = Column(Float, nullable=False)
    total_cost = Column(Float, nullable=False)
    account = Column(String(255), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Holding(id={self.id}, ticker={self.ticker}, quantity={self.quantity})>"
