# src/cityscope/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ErrorResponse
from .post import (
    PostEnvelope,
    PostListResponse,
    PostResponse,
    PostUpdate,
    ProfileResponse,
    ReplyCreate,
    ReplyEnvelope,
    ReplyResponse,
)
from .reaction import ReactionCreate, ReactionSummary
from .user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserEnvelope,
    UserResponse,
)

__all__ = [
    "ErrorResponse",
    "PostEnvelope", "PostListResponse", "PostResponse", "PostUpdate", "ProfileResponse",
    "ReplyCreate", "ReplyEnvelope", "ReplyResponse",
    "ReactionCreate", "ReactionSummary",
    "AuthResponse", "LoginRequest", "ProfileUpdateRequest", "RegisterRequest",
    "UserEnvelope", "UserResponse",
]
