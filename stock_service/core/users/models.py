"""Pydantic schemas for user operations."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from stock_service.db.models import User

logger = logging.getLogger(__name__)


class UserUpdate(BaseModel):
    """Full replacement of a user record."""

    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    email: str = ""
    password: str = ""
    timezone: str = ""
    profile_image_url: str = Field("", alias="profileImageUrl")

    model_config = ConfigDict(populate_by_name=True)


class UserResponse(BaseModel):
    """User as returned to clients."""

    id: str = Field(..., alias="_id")
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str
    timezone: str = ""
    profile_image_url: str = Field("", alias="profileImageUrl")
    date: datetime

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_record(cls, user: User) -> "UserResponse":
        return cls.model_validate(_record_fields(user))


class UserWithPasswordResponse(UserResponse):
    """Legacy shape that also echoes the stored password hash."""

    password: str

    @classmethod
    def from_record(cls, user: User) -> "UserWithPasswordResponse":
        return cls.model_validate({**_record_fields(user), "password": user.password})


def _record_fields(user: User) -> dict:
    return {
        "_id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "email": user.email,
        "timezone": user.timezone or "",
        "profileImageUrl": user.profile_image_url or "",
        "date": user.date,
    }


def user_response(user: User, include_password: bool = False) -> UserResponse:
    """Serialize a user, echoing the hash only when explicitly enabled."""
    if include_password:
        return UserWithPasswordResponse.from_record(user)
    return UserResponse.from_record(user)


def users_from_records(users: Iterable[User]) -> List[UserResponse]:
    """Convert rows to responses, skipping rows that fail to decode."""
    decoded: List[UserResponse] = []
    for user in users:
        try:
            decoded.append(UserResponse.from_record(user))
        except ValidationError as e:
            logger.warning(f"Failed to decode user {getattr(user, 'id', None)}: {e}")
            continue
    return decoded

