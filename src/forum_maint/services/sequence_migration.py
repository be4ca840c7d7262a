"""Two-phase post number migration.

Phase A moves every post that has to change number into the negative range
and stages its target in ``sort_order``. Phase B writes the staged target
back. Live numbers are positive, so after Phase A every number about to be
reused is free and neither phase can produce a duplicate under the
``(topic_id, post_number)`` unique index.
"""

from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from forum_maint.models import Post
from forum_maint.services.post_ordering import ranked_posts_subquery

__all__ = ["apply_staged_numbers", "negate_and_stage"]

logger = logging.getLogger(__name__)


def negate_and_stage(session: Session, topic_id: int | None = None) -> int:
    """Phase A: negate the number of each post that moves and stage its target.

    Posts already at their target are left alone. Posts that are already
    negative are skipped, so running this twice changes nothing the second
    time.

    Returns:
        Number of posts moved into the negative range.
    """
    ranked = ranked_posts_subquery(topic_id)
    stmt = (
        update(Post)
        .where(Post.id == ranked.c.post_id)
        .where(ranked.c.post_number > 0)
        .where(ranked.c.post_number != ranked.c.target_number)
        .values(sort_order=ranked.c.target_number, post_number=-Post.post_number)
        .execution_options(synchronize_session=False)
    )
    moved = session.execute(stmt).rowcount
    logger.debug("Phase A negated %d posts (topic=%s)", moved, topic_id)
    return moved


def apply_staged_numbers(session: Session, topic_id: int | None = None) -> int:
    """Phase B: give every negated post its staged number.

    Idempotent: once all numbers are positive there is nothing to match.

    Returns:
        Number of posts renumbered.
    """
    stmt = (
        update(Post)
        .where(Post.post_number < 0)
        .where(Post.deleted.is_(False))
        .values(post_number=Post.sort_order)
        .execution_options(synchronize_session=False)
    )
    if topic_id is not None:
        stmt = stmt.where(Post.topic_id == topic_id)
    applied = session.execute(stmt).rowcount
    logger.debug("Phase B applied %d staged numbers (topic=%s)", applied, topic_id)
    return applied
