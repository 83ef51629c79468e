# src/cityscope/models/reply.py
"""Replies appended to a post."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cityscope.db.session import Base, utcnow

from .post import CONTENT_MAX_LENGTH

if TYPE_CHECKING:
    from .post import Post
    from .user import User


class Reply(Base):
    """A reply to a post. Append-only; the id gives display order."""

    __tablename__ = "post_reply"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(String(CONTENT_MAX_LENGTH), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    post: Mapped[Post] = relationship("Post", back_populates="replies")
    author: Mapped[User] = relationship("User")
