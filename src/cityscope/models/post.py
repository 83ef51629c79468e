# src/cityscope/models/post.py
"""SQLAlchemy models for neighborhood posts."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cityscope.db.session import Base, utcnow

from .user import LOCATION_MAX_LENGTH

if TYPE_CHECKING:
    from .reaction import PostReaction
    from .reply import Reply
    from .user import User

CONTENT_MAX_LENGTH = 280


class PostType(str, Enum):
    """Category tag shown on every post."""

    RECOMMENDATION = "recommendation"
    HELP = "help"
    UPDATE = "update"
    EVENT = "event"


DEFAULT_POST_TYPE = PostType.UPDATE


class Post(Base):
    """A short message published by a user for their neighborhood."""

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint(
            "post_type IN ('recommendation', 'help', 'update', 'event')",
            name="ck_post_post_type",
        ),
        Index("ix_post_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(String(CONTENT_MAX_LENGTH), nullable=False)
    post_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DEFAULT_POST_TYPE.value,
    )
    location: Mapped[str] = mapped_column(String(LOCATION_MAX_LENGTH), nullable=False)
    # Reference returned by the image store, never raw bytes.
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    author: Mapped[User] = relationship("User", back_populates="posts")
    replies: Mapped[list[Reply]] = relationship(
        "Reply",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Reply.id",
    )
    reactions: Mapped[list[PostReaction]] = relationship(
        "PostReaction",
        back_populates="post",
        cascade="all, delete-orphan",
    )
