"""Data access helpers for working with posts."""
from __future__ import annotations

from collections.abc import Iterator

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from forum_maint.models import Post

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def _live(self, topic_id: int | None) -> Select[tuple[Post]]:
        stmt = select(Post).where(Post.deleted.is_(False))
        if topic_id is not None:
            stmt = stmt.where(Post.topic_id == topic_id)
        return stmt

    def count(self, topic_id: int | None = None) -> int:
        """Return the number of live posts in scope."""
        stmt = select(func.count()).select_from(Post).where(Post.deleted.is_(False))
        if topic_id is not None:
            stmt = stmt.where(Post.topic_id == topic_id)
        return self.session.execute(stmt).scalar_one()

    def iter_posts(self, topic_id: int | None = None, batch_size: int = 500) -> Iterator[Post]:
        """Yield live posts in id order, fetching ``batch_size`` rows at a time.

        Pages by id rather than offset so rows written by the caller in
        between batches do not shift the window.
        """
        last_id = 0
        while True:
            batch = list(
                self.session.execute(
                    self._live(topic_id)
                    .where(Post.id > last_id)
                    .order_by(Post.id)
                    .limit(batch_size)
                ).scalars()
            )
            if not batch:
                return
            yield from batch
            last_id = batch[-1].id
