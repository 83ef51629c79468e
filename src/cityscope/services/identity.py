"""Identity gate: turns a presented bearer credential into a caller identity.

Every mutating operation resolves the caller through :class:`IdentityGate`
before touching any state. Verification is deterministic for a given token,
so a rejected credential is never retried.
"""
from __future__ import annotations

from dataclasses import dataclass

from jose import JWTError
from sqlalchemy.orm import Session

from cityscope.core.errors import Unauthenticated
from cityscope.core.security import create_access_token, decode_access_token
from cityscope.models import User


@dataclass(frozen=True)
class Identity:
    """Stable identity of an authenticated caller."""

    user_id: int
    username: str


def issue_credential(user: User) -> str:
    """Issue a bearer credential for ``user``."""
    return create_access_token(user.id)


class IdentityGate:
    """Verifies bearer credentials against registered users."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def authorize(self, credential: str | None) -> Identity:
        """Resolve ``credential`` to the caller's identity.

        Args:
            credential: Raw bearer token, or None when the request carried none.

        Returns:
            The identity of the user the token was issued to.

        Raises:
            Unauthenticated: If the token is missing, malformed, expired, or
                refers to a user that no longer exists.
        """
        if not credential:
            raise Unauthenticated("No token, authorization denied")

        try:
            payload = decode_access_token(credential)
        except JWTError as err:
            raise Unauthenticated("Token is not valid") from err

        subject = payload.get("sub")
        try:
            user_id = int(subject)
        except (TypeError, ValueError) as err:
            raise Unauthenticated("Token is not valid") from err

        user = self.db.get(User, user_id)
        if user is None:
            raise Unauthenticated("User not found")
        return Identity(user_id=user.id, username=user.username)
