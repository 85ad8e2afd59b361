"""User repository for CRUD operations."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from stock_service.db.models import User


class UserRepository:
    """Repository for User CRUD operations."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def get_all(self) -> List[User]:
        """Get all users."""
        return self.db.query(User).order_by(User.date).all()

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by ID."""
        return self.db.query(User).filter_by(id=user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address."""
        return self.db.query(User).filter(User.email == email).first()

    def create(self, user: User) -> User:
        """Insert a user and commit.

        Raises:
            IntegrityError: If the email is already taken
        """
        self.db.add(user)
        self.db.commit()
        return user

    def replace(
        self,
        user_id: str,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        timezone: str = "",
        profile_image_url: str = "",
    ) -> Optional[User]:
        """Replace every mutable field of a user.

        Args:
            user_id: User ID
            first_name: New first name
            last_name: New last name
            email: New email address
            password_hash: Already hashed password
            timezone: New timezone
            profile_image_url: New profile image reference

        Returns:
            Updated user or None if not found

        Raises:
            IntegrityError: If the email belongs to another user
        """
        user = self.get_by_id(user_id)
        if not user:
            return None

        user.first_name = first_name
        user.last_name = last_name
        user.email = email
        user.password = password_hash
        user.timezone = timezone
        user.profile_image_url = profile_image_url

        self.db.commit()
        return user

    def delete(self, user_id: str) -> Optional[User]:
        """Delete a user.

        Returns:
            The deleted user, or None if not found
        """
        user = self.get_by_id(user_id)
        if not user:
            return None

        self.db.delete(user)
        self.db.commit()
        return user
