"""Data access helpers for working with posts."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from cityscope.models import Post, PostReaction, PostType, ReactionKind, Reply

__all__ = ["PostRepository", "ReactionCounts"]

# (likes, dislikes)
ReactionCounts = tuple[int, int]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int, *, with_replies: bool = False) -> Post | None:
        """Return a post by identifier, reloading it from the database."""
        stmt = select(Post).where(Post.id == post_id).options(selectinload(Post.author))
        if with_replies:
            stmt = stmt.options(selectinload(Post.replies).selectinload(Reply.author))
        stmt = stmt.execution_options(populate_existing=True)
        return self.session.scalars(stmt).first()

    def get_for_update(self, post_id: int) -> Post | None:
        """Return a post and lock its row until the current transaction ends.

        SQLite has no row locks; its transactions start with ``BEGIN IMMEDIATE``
        instead (see ``cityscope.db.session``).
        """
        stmt = (
            select(Post)
            .where(Post.id == post_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.scalars(stmt).first()

    def list_filtered(
        self,
        *,
        location: str | None = None,
        post_type: PostType | None = None,
        author_id: int | None = None,
        limit: int | None = None,
    ) -> list[Post]:
        """Return posts matching every given filter, newest first.

        Args:
            location: Case-insensitive substring of the post location.
            post_type: Exact category to match.
            author_id: Restrict to posts by this user.
            limit: Maximum number of posts to return.
        """
        stmt = select(Post).options(selectinload(Post.author))
        if location:
            stmt = stmt.where(Post.location.icontains(location, autoescape=True))
        if post_type is not None:
            stmt = stmt.where(Post.post_type == post_type.value)
        if author_id is not None:
            stmt = stmt.where(Post.author_id == author_id)
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.scalars(stmt))

    def reaction_counts(self, post_ids: Sequence[int]) -> dict[int, ReactionCounts]:
        """Return ``{post_id: (likes, dislikes)}`` for the given posts."""
        counts: dict[int, list[int]] = {post_id: [0, 0] for post_id in post_ids}
        if not post_ids:
            return {}
        rows = self.session.execute(
            select(PostReaction.post_id, PostReaction.kind, func.count())
            .where(PostReaction.post_id.in_(post_ids))
            .group_by(PostReaction.post_id, PostReaction.kind)
        )
        for post_id, kind, total in rows:
            slot = 0 if kind == ReactionKind.LIKE.value else 1
            counts[post_id][slot] = int(total)
        return {post_id: (likes, dislikes) for post_id, (likes, dislikes) in counts.items()}

    def user_reactions(self, post_ids: Sequence[int], user_id: int) -> dict[int, ReactionKind]:
        """Return the reactions ``user_id`` holds on the given posts."""
        if not post_ids:
            return {}
        rows = self.session.execute(
            select(PostReaction.post_id, PostReaction.kind).where(
                PostReaction.post_id.in_(post_ids),
                PostReaction.user_id == user_id,
            )
        )
        return {post_id: ReactionKind(kind) for post_id, kind in rows}

    def get_reaction(self, post_id: int, user_id: int) -> PostReaction | None:
        """Return the caller's reaction row on a post, if any."""
        return self.session.get(
            PostReaction,
            (post_id, user_id),
            populate_existing=True,
        )

    def reply_counts(self, post_ids: Sequence[int]) -> dict[int, int]:
        """Return ``{post_id: number_of_replies}`` for the given posts."""
        if not post_ids:
            return {}
        rows = self.session.execute(
            select(Reply.post_id, func.count())
            .where(Reply.post_id.in_(post_ids))
            .group_by(Reply.post_id)
        )
        counts = {post_id: 0 for post_id in post_ids}
        counts.update({post_id: int(total) for post_id, total in rows})
        return counts

    def list_replies(self, post_id: int) -> list[Reply]:
        """Return the replies of a post in insertion order."""
        stmt = (
            select(Reply)
            .where(Reply.post_id == post_id)
            .options(selectinload(Reply.author))
            .order_by(Reply.id)
        )
        return list(self.session.scalars(stmt))
