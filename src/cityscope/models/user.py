# src/cityscope/models/user.py
"""SQLAlchemy model for registered neighbors."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cityscope.db.session import Base, utcnow

if TYPE_CHECKING:
    from .post import Post

USERNAME_MAX_LENGTH = 30
BIO_MAX_LENGTH = 160
LOCATION_MAX_LENGTH = 100


class User(Base):
    """A registered account identified by a unique, case-sensitive handle."""

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String(USERNAME_MAX_LENGTH),
        unique=True,
        nullable=False,
    )
    # Never serialized; see schemas.user.UserResponse.
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    bio: Mapped[str | None] = mapped_column(String(BIO_MAX_LENGTH), nullable=True)
    location: Mapped[str | None] = mapped_column(String(LOCATION_MAX_LENGTH), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    posts: Mapped[list[Post]] = relationship("Post", back_populates="author")
