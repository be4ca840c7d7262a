"""Rank posts within their topic by creation time."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.sql.selectable import Subquery
from sqlalchemy.orm import Session, aliased

from forum_maint.models import Post

__all__ = ["PostRank", "ranked_posts_subquery", "resolve_ordering"]


@dataclass(frozen=True)
class PostRank:
    """Current and target number of one live post."""

    post_id: int
    topic_id: int
    post_number: int
    target_number: int

    @property
    def moves(self) -> bool:
        """Whether the post has to change number."""
        return self.post_number != self.target_number


def ranked_posts_subquery(topic_id: int | None = None) -> Subquery:
    """Return a derived table ranking live posts per topic.

    The rank orders by ``created_at`` and breaks ties with the current
    ``post_number``, so it is a total order and yields a dense ``1..N`` per
    topic. Columns: ``post_id``, ``topic_id``, ``post_number``,
    ``target_number``.

    Args:
        topic_id: Restrict the ranking to a single topic.
    """
    ranked = aliased(Post, name="ranked_source")
    stmt = select(
        ranked.id.label("post_id"),
        ranked.topic_id.label("topic_id"),
        ranked.post_number.label("post_number"),
        func.row_number()
        .over(
            partition_by=ranked.topic_id,
            order_by=(ranked.created_at, ranked.post_number),
        )
        .label("target_number"),
    ).where(ranked.deleted.is_(False))
    if topic_id is not None:
        stmt = stmt.where(ranked.topic_id == topic_id)
    # Used as a derived table inside UPDATE ... FROM; never correlate.
    return stmt.correlate(None).subquery("ranked_posts")


def resolve_ordering(session: Session, topic_id: int | None = None) -> list[PostRank]:
    """Return the target number of every live post in scope.

    Read only. Rows are ordered by topic and target number.
    """
    ranked = ranked_posts_subquery(topic_id)
    rows = session.execute(
        select(
            ranked.c.post_id,
            ranked.c.topic_id,
            ranked.c.post_number,
            ranked.c.target_number,
        ).order_by(ranked.c.topic_id, ranked.c.target_number)
    ).all()
    return [
        PostRank(
            post_id=row.post_id,
            topic_id=row.topic_id,
            post_number=row.post_number,
            target_number=row.target_number,
        )
        for row in rows
    ]
