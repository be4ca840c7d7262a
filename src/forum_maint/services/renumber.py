"""Renumber posts so that post numbers follow creation time.

The whole run is one transaction: rank the posts, move the ones that change
into the negative range, mark the references that follow them, write the
final numbers and flip the marks back. Either every post and every reference
reflects the new numbering or nothing changed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum

from sqlalchemy import and_, func, or_, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from forum_maint.core.settings import settings
from forum_maint.models import Post
from forum_maint.services.errors import ConstraintViolation, MaintenanceError, TransactionAborted
from forum_maint.services.post_ordering import resolve_ordering
from forum_maint.services.reference_propagation import (
    REFERENCE_COLUMNS,
    count_dangling_references,
    count_negative_references,
    finalize_references,
    mark_pending_references,
)
from forum_maint.services.sequence_migration import apply_staged_numbers, negate_and_stage

__all__ = ["RenumberResult", "RenumberStatus", "renumber_posts", "reorder_posts_command"]

logger = logging.getLogger(__name__)


class RenumberStatus(StrEnum):
    """Terminal outcome of a renumbering run."""

    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass
class RenumberResult:
    """Summary of a committed renumbering run."""

    topic_id: int | None
    status: RenumberStatus = RenumberStatus.COMMITTED
    posts_moved: int = 0
    references_updated: dict[str, int] = field(default_factory=dict)
    dangling_references: dict[str, int] = field(default_factory=dict)


def renumber_posts(
    session: Session,
    topic_id: int | None = None,
    *,
    lock_timeout_ms: int | None = None,
) -> RenumberResult:
    """Renumber live posts by ``(created_at, post_number)`` and commit.

    Args:
        session: Session with no pending work of its own; it is committed or
            rolled back here.
        topic_id: Limit the run to one topic. ``None`` renumbers every topic.
        lock_timeout_ms: How long to wait for row locks on PostgreSQL.
            Defaults to ``settings.renumber_lock_timeout_ms``.

    Returns:
        What changed.

    Raises:
        ConstraintViolation: A post number in scope is negative or zero, a
            reference in scope is negative, or the store rejected the new
            numbering. Nothing was changed and a retry will fail the same way.
        TransactionAborted: The store failed or the posts changed under the
            run. Nothing was changed and the run may be retried.
    """
    if lock_timeout_ms is None:
        lock_timeout_ms = settings.renumber_lock_timeout_ms
    try:
        result = _renumber_in_transaction(session, topic_id, lock_timeout_ms)
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise ConstraintViolation(
            f"Renumbering topic={topic_id} broke a constraint: {exc}"
        ) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise TransactionAborted(f"Renumbering topic={topic_id} rolled back: {exc}") from exc
    except BaseException:
        session.rollback()
        raise
    logger.info(
        "Renumbered %d posts (topic=%s), references updated: %s",
        result.posts_moved,
        topic_id,
        result.references_updated,
    )
    return result


def _renumber_in_transaction(
    session: Session,
    topic_id: int | None,
    lock_timeout_ms: int,
) -> RenumberResult:
    _lock_topic_posts(session, topic_id, lock_timeout_ms)
    _check_preconditions(session, topic_id)

    result = RenumberResult(topic_id=topic_id)
    plan = [rank for rank in resolve_ordering(session, topic_id) if rank.moves]
    if not plan:
        logger.info("Post numbers already follow creation time (topic=%s)", topic_id)
        return result

    for column in REFERENCE_COLUMNS:
        dangling = count_dangling_references(session, column, topic_id)
        if dangling:
            logger.info(
                "%d rows of %s point at no live post and are left as is (topic=%s)",
                dangling,
                column.name,
                topic_id,
            )
            result.dangling_references[column.name] = dangling

    moved = negate_and_stage(session, topic_id)
    if moved != len(plan):
        raise TransactionAborted(
            f"Posts changed during renumbering: planned {len(plan)} moves, negated {moved}"
        )

    for column in REFERENCE_COLUMNS:
        result.references_updated[column.name] = mark_pending_references(
            session, column, topic_id
        )

    applied = apply_staged_numbers(session, topic_id)
    if applied != moved:
        raise ConstraintViolation(f"Negated {moved} posts but restored {applied}")

    for column in REFERENCE_COLUMNS:
        finalize_references(session, column, topic_id)

    result.posts_moved = moved
    return result


def _lock_topic_posts(session: Session, topic_id: int | None, lock_timeout_ms: int) -> None:
    """Lock the live posts in scope until the transaction ends.

    Runs for other topics do not touch these rows and are not blocked.
    Dialects without row locks (SQLite) serialize writers instead.
    """
    if session.get_bind().dialect.name == "postgresql":
        session.execute(text(f"SET LOCAL lock_timeout = {int(lock_timeout_ms)}"))
    stmt = select(Post.id).where(Post.deleted.is_(False)).with_for_update()
    if topic_id is not None:
        stmt = stmt.where(Post.topic_id == topic_id)
    session.execute(stmt).all()


def _check_preconditions(session: Session, topic_id: int | None) -> None:
    # Zero has no distinct negative, so a live post numbered 0 cannot be staged.
    stmt = (
        select(func.count())
        .select_from(Post)
        .where(
            or_(
                Post.post_number < 0,
                and_(Post.post_number == 0, Post.deleted.is_(False)),
            )
        )
    )
    if topic_id is not None:
        stmt = stmt.where(Post.topic_id == topic_id)
    invalid_posts = session.execute(stmt).scalar_one()
    if invalid_posts:
        raise ConstraintViolation(
            f"{invalid_posts} posts have a negative or zero post_number (topic={topic_id})"
        )
    for column in REFERENCE_COLUMNS:
        negative = count_negative_references(session, column, topic_id)
        if negative:
            raise ConstraintViolation(
                f"{negative} rows of {column.name} are already negative (topic={topic_id})"
            )


def reorder_posts_command(
    topic_id: int | None = None,
    session_factory: Callable[[], Session] | None = None,
) -> RenumberStatus:
    """Run a renumbering in its own session and report the terminal status."""
    if session_factory is None:
        from forum_maint.db.session import SessionLocal

        session_factory = SessionLocal

    session = session_factory()
    try:
        renumber_posts(session, topic_id)
    except MaintenanceError as exc:
        logger.error("Renumbering aborted (topic=%s): %s", topic_id, exc)
        return RenumberStatus.ABORTED
    finally:
        session.close()
    return RenumberStatus.COMMITTED
