# src/cityscope/services/__init__.py
"""Business logic services for the Cityscope application."""

from .identity import Identity, IdentityGate
from .image_store import ImageStore, ImageUpload, LocalImageStore
from .post_service import PostService
from .user_service import UserService

__all__ = [
    "Identity",
    "IdentityGate",
    "ImageStore",
    "ImageUpload",
    "LocalImageStore",
    "PostService",
    "UserService",
]
