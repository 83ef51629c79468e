# src/cityscope/api/v1/endpoints/posts.py
"""Post-related endpoints for the Cityscope API."""

from typing import Annotated

from fastapi import APIRouter, File, Form, Query, Response, UploadFile, status

from cityscope.api.v1.dependencies import (
    CurrentIdentityDep,
    OptionalIdentityDep,
    PostServiceDep,
)
from cityscope.schemas.post import (
    PostEnvelope,
    PostListResponse,
    PostResponse,
    PostUpdate,
    ReplyCreate,
    ReplyEnvelope,
    ReplyResponse,
)
from cityscope.schemas.reaction import ReactionCreate, ReactionSummary
from cityscope.services.image_store import ImageUpload

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=PostListResponse)
async def list_posts(
    posts: PostServiceDep,
    viewer: OptionalIdentityDep,
    location: str | None = Query(None, description="Case-insensitive location substring"),
    post_type: str | None = Query(None, alias="postType", description="Post type to match"),
    limit: int | None = Query(None, ge=1, le=100, description="Maximum number of posts"),
) -> PostListResponse:
    """List posts newest first, optionally filtered by location and type."""
    return PostListResponse(
        posts=posts.list_posts(
            location=location,
            post_type=post_type,
            viewer=viewer,
            limit=limit,
        )
    )


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, posts: PostServiceDep, viewer: OptionalIdentityDep) -> PostResponse:
    """Get a specific post with its replies."""
    return posts.get(post_id, viewer=viewer)


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def create_post(
    identity: CurrentIdentityDep,
    posts: PostServiceDep,
    content: Annotated[str, Form()] = "",
    post_type: Annotated[str | None, Form(alias="postType")] = None,
    location: Annotated[str, Form()] = "",
    image: Annotated[UploadFile | None, File()] = None,
) -> PostEnvelope:
    """Publish a post from a multipart form, with an optional image.

    Field checks happen in the service so that every offending field is
    reported in a single response.
    """
    upload = None
    if image is not None and image.filename:
        upload = ImageUpload(
            filename=image.filename,
            content_type=image.content_type,
            data=await image.read(),
        )
    post = posts.create(identity, content, post_type, location, upload)
    return PostEnvelope(post=post)


@router.put("/{post_id}", response_model=PostEnvelope)
async def update_post(
    post_id: int,
    payload: PostUpdate,
    identity: CurrentIdentityDep,
    posts: PostServiceDep,
) -> PostEnvelope:
    """Edit a post. Only the author may edit it."""
    post = posts.update(
        identity,
        post_id,
        content=payload.content,
        post_type=payload.post_type,
        location=payload.location,
    )
    return PostEnvelope(post=post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    identity: CurrentIdentityDep,
    posts: PostServiceDep,
) -> Response:
    """Delete a post with its replies and reactions. Author only."""
    posts.delete(identity, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/reactions", response_model=ReactionSummary)
async def add_reaction(
    post_id: int,
    payload: ReactionCreate,
    identity: CurrentIdentityDep,
    posts: PostServiceDep,
) -> ReactionSummary:
    """Like or dislike a post; repeating the same reaction removes it."""
    return posts.react(identity, post_id, payload.type)


@router.delete("/{post_id}/reactions", response_model=ReactionSummary)
async def remove_reaction(
    post_id: int,
    identity: CurrentIdentityDep,
    posts: PostServiceDep,
) -> ReactionSummary:
    """Remove the caller's reaction, if any."""
    return posts.unreact(identity, post_id)


@router.post(
    "/{post_id}/replies",
    response_model=ReplyEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def add_reply(
    post_id: int,
    payload: ReplyCreate,
    identity: CurrentIdentityDep,
    posts: PostServiceDep,
) -> ReplyEnvelope:
    """Append a reply to a post."""
    return ReplyEnvelope(reply=posts.reply(identity, post_id, payload.content))


@router.get("/{post_id}/replies", response_model=list[ReplyResponse])
async def list_replies(post_id: int, posts: PostServiceDep) -> list[ReplyResponse]:
    """Return the replies of a post in the order they were written."""
    return posts.list_replies(post_id)
