"""Bulk removal of likes and flags."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from forum_maint.models import Post, PostAction, PostActionType

__all__ = ["delete_all_flags", "delete_all_likes", "delete_post_actions"]

logger = logging.getLogger(__name__)


def delete_post_actions(
    session: Session,
    action_types: Iterable[PostActionType],
    topic_id: int | None = None,
) -> int:
    """Delete post actions of the given types and commit.

    Removing likes also zeroes the cached ``like_count`` of posts in scope.

    Returns:
        Number of actions deleted.
    """
    types = [PostActionType(action_type) for action_type in action_types]
    stmt = delete(PostAction).where(PostAction.action_type.in_([str(t) for t in types]))
    if topic_id is not None:
        stmt = stmt.where(
            PostAction.post_id.in_(select(Post.id).where(Post.topic_id == topic_id))
        )
    deleted = session.execute(stmt.execution_options(synchronize_session=False)).rowcount

    if PostActionType.LIKE in types:
        reset = update(Post).where(Post.like_count != 0).values(like_count=0)
        if topic_id is not None:
            reset = reset.where(Post.topic_id == topic_id)
        session.execute(reset.execution_options(synchronize_session=False))

    session.commit()
    logger.info(
        "Deleted %d post actions of type %s (topic=%s)",
        deleted,
        ", ".join(str(t) for t in types),
        topic_id,
    )
    return deleted


def delete_all_likes(session: Session, topic_id: int | None = None) -> int:
    """Delete every like in scope."""
    return delete_post_actions(session, [PostActionType.LIKE], topic_id)


def delete_all_flags(session: Session, topic_id: int | None = None) -> int:
    """Delete every flag in scope."""
    return delete_post_actions(session, PostActionType.flag_types(), topic_id)
