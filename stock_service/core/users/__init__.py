"""User administration."""

from .models import UserResponse, UserUpdate, UserWithPasswordResponse, user_response, users_from_records
from .repository import UserRepository

__all__ = [
    "UserResponse",
    "UserUpdate",
    "UserWithPasswordResponse",
    "user_response",
    "users_from_records",
    "UserRepository",
]
