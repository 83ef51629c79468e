# src/cityscope/api/v1/endpoints/users.py
"""Profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from cityscope.api.v1.dependencies import (
    CurrentIdentityDep,
    OptionalIdentityDep,
    PostServiceDep,
    UserServiceDep,
)
from cityscope.schemas.post import PostListResponse, ProfileResponse
from cityscope.schemas.user import ProfileUpdateRequest, UserEnvelope, UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{username}", response_model=ProfileResponse)
async def get_profile(
    username: str,
    users: UserServiceDep,
    posts: PostServiceDep,
    viewer: OptionalIdentityDep,
) -> ProfileResponse:
    """Return a user's public profile and their posts, newest first."""
    user = users.get_by_username(username)
    return ProfileResponse(
        user=UserResponse.model_validate(user),
        posts=posts.list_posts(author_id=user.id, viewer=viewer),
    )


@router.put("/{username}", response_model=UserEnvelope)
async def update_profile(
    username: str,
    payload: ProfileUpdateRequest,
    identity: CurrentIdentityDep,
    users: UserServiceDep,
) -> UserEnvelope:
    """Update the caller's own bio and location."""
    user = users.update_profile(identity, username, payload.model_dump(exclude_unset=True))
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.get("/{username}/posts", response_model=PostListResponse)
async def get_user_posts(
    username: str,
    users: UserServiceDep,
    posts: PostServiceDep,
    viewer: OptionalIdentityDep,
    post_type: str | None = Query(None, alias="postType"),
    limit: int | None = Query(None, ge=1, le=100),
) -> PostListResponse:
    """List posts written by one user."""
    user = users.get_by_username(username)
    return PostListResponse(
        posts=posts.list_posts(
            author_id=user.id,
            post_type=post_type,
            viewer=viewer,
            limit=limit,
        )
    )
