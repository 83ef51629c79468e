"""Reaction toggle rules.

A user holds at most one reaction per post, in one of three states: none,
liked, or disliked. Submitting the polarity already held removes it;
submitting the other polarity replaces it.
"""
from __future__ import annotations

from cityscope.models.reaction import ReactionKind


def next_reaction(
    current: ReactionKind | None,
    requested: ReactionKind,
) -> ReactionKind | None:
    """Return the reaction a user holds after submitting ``requested``.

    >>> next_reaction(None, ReactionKind.LIKE)
    <ReactionKind.LIKE: 'like'>
    >>> next_reaction(ReactionKind.LIKE, ReactionKind.LIKE) is None
    True
    >>> next_reaction(ReactionKind.LIKE, ReactionKind.DISLIKE)
    <ReactionKind.DISLIKE: 'dislike'>
    """
    if current == requested:
        return None
    return requested
