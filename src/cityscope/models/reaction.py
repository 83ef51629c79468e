# src/cityscope/models/reaction.py
"""Models capturing like/dislike reactions on posts."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cityscope.db.session import Base, utcnow

if TYPE_CHECKING:
    from .post import Post


class ReactionKind(str, Enum):
    """Polarity of a reaction."""

    LIKE = "like"
    DISLIKE = "dislike"


class PostReaction(Base):
    """Per-user reaction on a post."""

    __tablename__ = "post_reaction"
    __table_args__ = (
        CheckConstraint("kind IN ('like', 'dislike')", name="ck_post_reaction_kind"),
        Index("ix_post_reaction_post_id", "post_id"),
    )

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        primary_key=True,
    )

    # Composite primary key prevents duplicate reactions from the same user.

    kind: Mapped[str] = mapped_column(String(10), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    post: Mapped[Post] = relationship("Post", back_populates="reactions")
