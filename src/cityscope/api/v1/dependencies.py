"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cityscope.core.errors import Unauthenticated
from cityscope.db.session import get_db
from cityscope.services.identity import Identity, IdentityGate
from cityscope.services.image_store import ImageStore, get_image_store
from cityscope.services.post_service import PostService
from cityscope.services.user_service import UserService

# Missing credentials are reported by the identity gate, not by FastAPI.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
BearerDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def get_image_store_dep() -> ImageStore:
    """Return the shared image store."""
    return get_image_store()


def get_post_service(
    db: SessionDep,
    image_store: Annotated[ImageStore, Depends(get_image_store_dep)],
) -> PostService:
    """Build the post lifecycle service for this request."""
    return PostService(db, image_store)


def get_user_service(db: SessionDep) -> UserService:
    """Build the user service for this request."""
    return UserService(db)


def get_current_identity(credentials: BearerDep, db: SessionDep) -> Identity:
    """Resolve the caller from the bearer token or reject the request.

    Raises:
        Unauthenticated: If the token is missing or invalid.
    """
    token = credentials.credentials if credentials else None
    return IdentityGate(db).authorize(token)


def get_optional_identity(credentials: BearerDep, db: SessionDep) -> Identity | None:
    """Resolve the caller if a valid token was sent; anonymous otherwise."""
    if credentials is None:
        return None
    try:
        return IdentityGate(db).authorize(credentials.credentials)
    except Unauthenticated:
        return None


# Type aliases for identity and service dependencies
CurrentIdentityDep = Annotated[Identity, Depends(get_current_identity)]
OptionalIdentityDep = Annotated[Identity | None, Depends(get_optional_identity)]
PostServiceDep = Annotated[PostService, Depends(get_post_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
