"""Account registration, login, and profile helpers."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cityscope.core import security
from cityscope.core.errors import (
    Conflict,
    Forbidden,
    NotFound,
    StorageError,
    Unauthenticated,
    ValidationError,
)
from cityscope.models import User
from cityscope.models.user import BIO_MAX_LENGTH, LOCATION_MAX_LENGTH
from cityscope.services.identity import Identity

__all__ = ["UserService"]

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class UserService:
    """CRUD-style helpers for managing users."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Database write failed: %s", exc, exc_info=True)
            raise StorageError("database write failed") from exc

    def find_by_username(self, username: str) -> User | None:
        """Return a user by exact, case-sensitive handle."""
        return self.db.scalars(select(User).where(User.username == username)).first()

    def get_by_username(self, username: str) -> User:
        """Return a user by handle or raise NotFound."""
        user = self.find_by_username(username)
        if user is None:
            raise NotFound("User not found")
        return user

    def register(
        self,
        username: str,
        password: str,
        location: str | None = None,
        bio: str | None = None,
    ) -> User:
        """Persist a new user with a hashed password.

        Raises:
            Conflict: If the username is already taken.
        """
        if self.find_by_username(username) is not None:
            raise Conflict("username")

        user = User(
            username=username,
            password_hash=security.hash_password(password),
            location=_clean(location),
            bio=_clean(bio),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # Lost a race against a concurrent registration of the same handle.
            self.db.rollback()
            raise Conflict("username") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Database write failed: %s", exc, exc_info=True)
            raise StorageError("database write failed") from exc
        self.db.refresh(user)
        logger.info("Registered user %s", user.username)
        return user

    def authenticate(self, username: str, password: str) -> User:
        """Return the user whose credentials match.

        Raises:
            Unauthenticated: For an unknown username or a wrong password alike.
        """
        user = self.find_by_username(username)
        if user is None or not security.verify_password(password, user.password_hash):
            raise Unauthenticated("Invalid credentials")
        return user

    def update_profile(
        self,
        identity: Identity,
        username: str,
        changes: dict[str, Any],
    ) -> User:
        """Apply partial profile updates for the caller's own account.

        Args:
            identity: The authenticated caller.
            username: Handle of the profile being edited.
            changes: Submitted fields only (``bio`` and/or ``location``).

        Raises:
            NotFound: If no such user exists.
            Forbidden: If the caller is editing someone else's profile.
            ValidationError: If a field is too long.
        """
        user = self.get_by_username(username)
        if user.id != identity.user_id:
            raise Forbidden("You can only update your own profile")

        errors: dict[str, str] = {}
        updates: dict[str, str | None] = {}
        if "bio" in changes:
            bio = _clean(changes["bio"])
            if bio is not None and len(bio) > BIO_MAX_LENGTH:
                errors["bio"] = f"Bio cannot exceed {BIO_MAX_LENGTH} characters"
            updates["bio"] = bio
        if "location" in changes:
            location = _clean(changes["location"])
            if location is not None and len(location) > LOCATION_MAX_LENGTH:
                errors["location"] = f"Location cannot exceed {LOCATION_MAX_LENGTH} characters"
            updates["location"] = location
        if errors:
            raise ValidationError(errors)

        for key, value in updates.items():
            setattr(user, key, value)
        self._commit()
        self.db.refresh(user)
        return user
