# src/cityscope/models/__init__.py
"""SQLAlchemy models for the Cityscope application."""

from .post import Post, PostType
from .reaction import PostReaction, ReactionKind
from .reply import Reply
from .user import User

__all__ = [
    "Post", "PostType",
    "PostReaction", "ReactionKind",
    "Reply",
    "User",
]
