"""Keep positional references to posts in step with renumbering.

Several tables store a post as ``(topic_id, post_number)`` rather than by id.
While the posts are negated (between Phase A and Phase B) a reference that
equals ``abs(post_number)`` of a negated post is rewritten to the negated
*target* of that post. Negative marks are never matched again, so each
reference moves exactly once even when its new number equals some other
post's old one. After Phase B the marks are flipped back to positive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import exists, func, select, update
from sqlalchemy.orm import InstrumentedAttribute, Session, aliased

from forum_maint.models import Notification, Post, PostTiming, TopicUser

__all__ = [
    "REFERENCE_COLUMNS",
    "ReferenceColumn",
    "count_dangling_references",
    "count_negative_references",
    "finalize_references",
    "mark_pending_references",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ReferenceColumn:
    """A column holding a post number, scoped by a topic column on the same model."""

    name: str
    model: type[Any]
    topic: InstrumentedAttribute[Any]
    number: InstrumentedAttribute[Any]


REFERENCE_COLUMNS: tuple[ReferenceColumn, ...] = (
    ReferenceColumn(
        "notifications.post_number",
        Notification,
        Notification.topic_id,
        Notification.post_number,
    ),
    ReferenceColumn(
        "post_timings.post_number",
        PostTiming,
        PostTiming.topic_id,
        PostTiming.post_number,
    ),
    ReferenceColumn(
        "posts.reply_to_post_number",
        Post,
        Post.topic_id,
        Post.reply_to_post_number,
    ),
    ReferenceColumn(
        "topic_users.last_read_post_number",
        TopicUser,
        TopicUser.topic_id,
        TopicUser.last_read_post_number,
    ),
    ReferenceColumn(
        "topic_users.last_emailed_post_number",
        TopicUser,
        TopicUser.topic_id,
        TopicUser.last_emailed_post_number,
    ),
)


def mark_pending_references(
    session: Session,
    column: ReferenceColumn,
    topic_id: int | None = None,
) -> int:
    """Rewrite references to negated posts as the negated target number.

    Must run after Phase A and before Phase B.

    Returns:
        Number of rows marked.
    """
    moved = aliased(Post, name="moved_posts")
    stmt = (
        update(column.model)
        .where(column.topic == moved.topic_id)
        .where(column.number == -moved.post_number)
        .where(moved.post_number < 0)
        .where(moved.deleted.is_(False))
        .values({column.number: -moved.sort_order})
        .execution_options(synchronize_session=False)
    )
    if topic_id is not None:
        stmt = stmt.where(moved.topic_id == topic_id)
    marked = session.execute(stmt).rowcount
    logger.debug("Marked %d rows of %s (topic=%s)", marked, column.name, topic_id)
    return marked


def finalize_references(
    session: Session,
    column: ReferenceColumn,
    topic_id: int | None = None,
) -> int:
    """Flip marked references to their final positive number.

    Returns:
        Number of rows flipped.
    """
    stmt = (
        update(column.model)
        .where(column.number < 0)
        .values({column.number: -column.number})
        .execution_options(synchronize_session=False)
    )
    if topic_id is not None:
        stmt = stmt.where(column.topic == topic_id)
    flipped = session.execute(stmt).rowcount
    logger.debug("Finalized %d rows of %s (topic=%s)", flipped, column.name, topic_id)
    return flipped


def count_negative_references(
    session: Session,
    column: ReferenceColumn,
    topic_id: int | None = None,
) -> int:
    """Count references in scope that already hold a negative number."""
    stmt = select(func.count()).select_from(column.model).where(column.number < 0)
    if topic_id is not None:
        stmt = stmt.where(column.topic == topic_id)
    return session.execute(stmt).scalar_one()


def count_dangling_references(
    session: Session,
    column: ReferenceColumn,
    topic_id: int | None = None,
) -> int:
    """Count references whose number matches no live post in their topic.

    Dangling references are tolerated; renumbering leaves them as they are.
    """
    live = aliased(Post, name="live_posts")
    stmt = (
        select(func.count())
        .select_from(column.model)
        .where(column.number.is_not(None))
        .where(
            ~exists().where(
                live.topic_id == column.topic,
                live.post_number == column.number,
                live.deleted.is_(False),
            )
        )
    )
    if topic_id is not None:
        stmt = stmt.where(column.topic == topic_id)
    return session.execute(stmt).scalar_one()
