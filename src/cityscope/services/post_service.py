"""Post lifecycle service: create, edit, delete, react, and reply.

Every mutation validates its input and checks ownership against state loaded
inside the same transaction before anything is written, so a failure at any
step leaves the stored post untouched.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cityscope.core.errors import (
    CityscopeError,
    Forbidden,
    NotFound,
    StorageError,
    ValidationError,
)
from cityscope.core.settings import settings
from cityscope.models import Post, PostReaction, PostType, ReactionKind, Reply
from cityscope.models.post import CONTENT_MAX_LENGTH, DEFAULT_POST_TYPE
from cityscope.models.user import LOCATION_MAX_LENGTH
from cityscope.repositories.post_repo import PostRepository
from cityscope.schemas.post import AuthorSummary, PostResponse, ReplyResponse
from cityscope.schemas.reaction import ReactionSummary
from cityscope.services.identity import Identity
from cityscope.services.image_store import ImageStore, ImageUpload
from cityscope.services.reactions import next_reaction

logger = logging.getLogger(__name__)

_POST_TYPES = ", ".join(post_type.value for post_type in PostType)


def _check_content(errors: dict[str, str], content: str | None, label: str) -> str:
    text = (content or "").strip()
    if not text:
        errors["content"] = f"{label} content is required"
    elif len(text) > CONTENT_MAX_LENGTH:
        errors["content"] = f"{label} content cannot exceed {CONTENT_MAX_LENGTH} characters"
    return text


def _check_post_type(errors: dict[str, str], post_type: str | PostType | None) -> PostType:
    if post_type is None or post_type == "":
        return DEFAULT_POST_TYPE
    try:
        return PostType(post_type)
    except ValueError:
        errors["postType"] = f"Post type must be one of: {_POST_TYPES}"
        return DEFAULT_POST_TYPE


def _check_location(errors: dict[str, str], location: str | None) -> str:
    text = (location or "").strip()
    if not text:
        errors["location"] = "Location is required"
    elif len(text) > LOCATION_MAX_LENGTH:
        errors["location"] = f"Location cannot exceed {LOCATION_MAX_LENGTH} characters"
    return text


def _check_image(errors: dict[str, str], image: ImageUpload | None) -> None:
    if image is None:
        return
    if not (image.content_type or "").startswith("image/"):
        errors["image"] = "Only image uploads are allowed"
    elif not image.data:
        errors["image"] = "Image is empty"
    elif len(image.data) > settings.max_image_bytes:
        limit_mb = settings.max_image_bytes // (1024 * 1024)
        errors["image"] = f"Image size must be less than {limit_mb}MB"


def parse_post_type(post_type: str | None) -> PostType | None:
    """Parse a post type filter. Empty values mean "no filter"."""
    if not post_type:
        return None
    try:
        return PostType(post_type)
    except ValueError as err:
        raise ValidationError({"postType": f"Post type must be one of: {_POST_TYPES}"}) from err


def to_reply_out(reply: Reply) -> ReplyResponse:
    """Convert a Reply ORM instance to an API schema."""
    return ReplyResponse(
        id=reply.id,
        post_id=reply.post_id,
        author=AuthorSummary.model_validate(reply.author),
        content=reply.content,
        created_at=reply.created_at,
    )


class PostService:
    """Owns the lifecycle of posts and their reactions and replies."""

    def __init__(self, db: Session, image_store: ImageStore) -> None:
        self.db = db
        self.repo = PostRepository(db)
        self.image_store = image_store

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Commit on success; roll back and translate database failures."""
        try:
            yield
            self.db.commit()
        except CityscopeError:
            self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Database write failed: %s", exc, exc_info=True)
            raise StorageError("database write failed") from exc

    def _require_post(self, post_id: int, *, lock: bool = False) -> Post:
        post = self.repo.get_for_update(post_id) if lock else self.repo.get_by_id(post_id)
        if post is None:
            raise NotFound("Post not found")
        return post

    def _summary(self, post_id: int, user_id: int | None) -> ReactionSummary:
        likes, dislikes = self.repo.reaction_counts([post_id]).get(post_id, (0, 0))
        user_reaction = None
        if user_id is not None:
            user_reaction = self.repo.user_reactions([post_id], user_id).get(post_id)
        return ReactionSummary(likes=likes, dislikes=dislikes, user_reaction=user_reaction)

    def _to_views(
        self,
        posts: list[Post],
        viewer: Identity | None,
        *,
        include_replies: bool = False,
    ) -> list[PostResponse]:
        ids = [post.id for post in posts]
        counts = self.repo.reaction_counts(ids)
        reply_counts = self.repo.reply_counts(ids)
        mine = self.repo.user_reactions(ids, viewer.user_id) if viewer else {}
        views = []
        for post in posts:
            likes, dislikes = counts.get(post.id, (0, 0))
            views.append(
                PostResponse(
                    id=post.id,
                    author=AuthorSummary.model_validate(post.author),
                    content=post.content,
                    post_type=PostType(post.post_type),
                    location=post.location,
                    image_url=post.image_url,
                    created_at=post.created_at,
                    likes=likes,
                    dislikes=dislikes,
                    user_reaction=mine.get(post.id),
                    reply_count=reply_counts.get(post.id, 0),
                    replies=[to_reply_out(r) for r in post.replies] if include_replies else None,
                )
            )
        return views

    def create(
        self,
        identity: Identity,
        content: str | None,
        post_type: str | None,
        location: str | None,
        image: ImageUpload | None = None,
    ) -> PostResponse:
        """Publish a new post authored by ``identity``.

        The image, if any, is stored before the post row is written; a store
        failure aborts creation. If the row cannot be written the stored image
        is discarded again.

        Raises:
            ValidationError: Naming every offending field.
            StorageError: If the image store or database fails.
        """
        errors: dict[str, str] = {}
        text = _check_content(errors, content, "Post")
        kind = _check_post_type(errors, post_type)
        place = _check_location(errors, location)
        _check_image(errors, image)
        if errors:
            raise ValidationError(errors)

        image_url = self.image_store.save(image) if image is not None else None

        post = Post(
            author_id=identity.user_id,
            content=text,
            post_type=kind.value,
            location=place,
            image_url=image_url,
        )
        try:
            with self._transaction():
                self.db.add(post)
        except StorageError:
            if image_url is not None:
                self.image_store.discard(image_url)
            raise

        logger.info("User %s created post %s", identity.username, post.id)
        return self.get(post.id, viewer=identity)

    def update(
        self,
        identity: Identity,
        post_id: int,
        *,
        content: str | None = None,
        post_type: str | None = None,
        location: str | None = None,
    ) -> PostResponse:
        """Edit the given fields of a post. Only its author may do so."""
        with self._transaction():
            post = self._require_post(post_id, lock=True)
            if post.author_id != identity.user_id:
                raise Forbidden("You can only edit your own posts")

            errors: dict[str, str] = {}
            text = _check_content(errors, content, "Post") if content is not None else None
            kind = _check_post_type(errors, post_type) if post_type is not None else None
            place = _check_location(errors, location) if location is not None else None
            if errors:
                raise ValidationError(errors)

            if text is not None:
                post.content = text
            if kind is not None:
                post.post_type = kind.value
            if place is not None:
                post.location = place

        return self.get(post_id, viewer=identity)

    def delete(self, identity: Identity, post_id: int) -> None:
        """Remove a post with all of its replies and reactions.

        Raises:
            NotFound: If the post does not exist.
            Forbidden: If ``identity`` is not the author.
        """
        with self._transaction():
            post = self._require_post(post_id, lock=True)
            if post.author_id != identity.user_id:
                raise Forbidden("You can only delete your own posts")
            image_url = post.image_url
            self.db.delete(post)

        logger.info("User %s deleted post %s", identity.username, post_id)
        if image_url:
            try:
                self.image_store.discard(image_url)
            except StorageError as exc:
                logger.warning("Post %s deleted but its image was kept: %s", post_id, exc)

    def react(self, identity: Identity, post_id: int, kind: ReactionKind) -> ReactionSummary:
        """Apply a like/dislike toggle for the caller on a post.

        The post row is locked while the caller's current reaction is read and
        replaced, so concurrent reactions on the same post cannot lose updates.
        """
        with self._transaction():
            self._require_post(post_id, lock=True)
            existing = self.repo.get_reaction(post_id, identity.user_id)
            current = ReactionKind(existing.kind) if existing else None
            target = next_reaction(current, kind)

            if target is None:
                if existing is not None:
                    self.db.delete(existing)
            elif existing is None:
                self.db.add(
                    PostReaction(post_id=post_id, user_id=identity.user_id, kind=target.value)
                )
            else:
                existing.kind = target.value
            self.db.flush()
            summary = self._summary(post_id, identity.user_id)

        return summary

    def unreact(self, identity: Identity, post_id: int) -> ReactionSummary:
        """Remove the caller's reaction if there is one."""
        with self._transaction():
            self._require_post(post_id, lock=True)
            existing = self.repo.get_reaction(post_id, identity.user_id)
            if existing is not None:
                self.db.delete(existing)
                self.db.flush()
            summary = self._summary(post_id, identity.user_id)

        return summary

    def reply(self, identity: Identity, post_id: int, content: str | None) -> ReplyResponse:
        """Append a reply by ``identity`` to a post."""
        errors: dict[str, str] = {}
        text = _check_content(errors, content, "Reply")
        if errors:
            raise ValidationError(errors)

        with self._transaction():
            self._require_post(post_id, lock=True)
            reply = Reply(post_id=post_id, author_id=identity.user_id, content=text)
            self.db.add(reply)

        self.db.refresh(reply)
        return to_reply_out(reply)

    def list_replies(self, post_id: int) -> list[ReplyResponse]:
        """Return a post's replies in the order they were written."""
        self._require_post(post_id)
        return [to_reply_out(reply) for reply in self.repo.list_replies(post_id)]

    def get(self, post_id: int, viewer: Identity | None = None) -> PostResponse:
        """Return one post with its replies."""
        post = self.repo.get_by_id(post_id, with_replies=True)
        if post is None:
            raise NotFound("Post not found")
        return self._to_views([post], viewer, include_replies=True)[0]

    def list_posts(
        self,
        *,
        location: str | None = None,
        post_type: str | None = None,
        viewer: Identity | None = None,
        author_id: int | None = None,
        limit: int | None = None,
    ) -> list[PostResponse]:
        """Return posts matching the filters, most recent first.

        Args:
            location: Case-insensitive substring of the post location.
            post_type: One of the post types; empty means any.
            viewer: Caller whose own reaction is reported, if known.
            author_id: Restrict to one author (profile pages).
            limit: Optional cap on the number of posts.
        """
        posts = self.repo.list_filtered(
            location=location.strip() if location else None,
            post_type=parse_post_type(post_type),
            author_id=author_id,
            limit=limit,
        )
        return self._to_views(posts, viewer)
