"""Reaction-related Pydantic schemas."""

from pydantic import Field

from cityscope.models.reaction import ReactionKind

from .common import CamelModel


class ReactionCreate(CamelModel):
    """Schema for reacting to a post."""

    type: ReactionKind = Field(..., description="'like' or 'dislike'")


class ReactionSummary(CamelModel):
    """Aggregate counts plus the caller's own reaction."""

    likes: int = 0
    dislikes: int = 0
    user_reaction: ReactionKind | None = None
