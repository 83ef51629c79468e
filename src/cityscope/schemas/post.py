"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from cityscope.models.post import PostType
from cityscope.models.reaction import ReactionKind

from .common import CamelModel
from .user import UserResponse


class AuthorSummary(CamelModel):
    """Author fields embedded in posts and replies."""

    id: int
    username: str
    location: str | None = None


class ReplyCreate(CamelModel):
    """Schema for replying to a post."""

    content: str = Field(..., description="Reply text, 1-280 characters")


class ReplyResponse(CamelModel):
    """Schema for reply information returned by the API."""

    id: int
    post_id: int
    author: AuthorSummary
    content: str
    created_at: datetime


class ReplyEnvelope(CamelModel):
    reply: ReplyResponse


class PostUpdate(CamelModel):
    """Schema for editing a post. Omitted fields keep their value."""

    content: str | None = None
    post_type: str | None = None
    location: str | None = None


class PostResponse(CamelModel):
    """Schema for post information returned by the API.

    Reactions are only exposed as aggregate counts plus the viewer's own
    reaction; ``replies`` is filled on detail reads only.
    """

    id: int
    author: AuthorSummary
    content: str
    post_type: PostType
    location: str
    image_url: str | None = None
    created_at: datetime
    likes: int = 0
    dislikes: int = 0
    user_reaction: ReactionKind | None = None
    reply_count: int = 0
    replies: list[ReplyResponse] | None = None


class PostEnvelope(CamelModel):
    post: PostResponse


class PostListResponse(CamelModel):
    posts: list[PostResponse]


class ProfileResponse(CamelModel):
    """A user's public profile together with their posts, newest first."""

    user: UserResponse
    posts: list[PostResponse]
