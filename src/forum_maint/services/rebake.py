"""Re-render posts in bulk through the rebake service."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from forum_maint.core.settings import Settings, override_settings, settings
from forum_maint.repositories.post_repo import PostRepository
from forum_maint.services.collaborators import BatchResult, RebakeOptions, RebakeService
from forum_maint.services.errors import CollaboratorError

__all__ = ["rebake_posts"]

logger = logging.getLogger(__name__)


def rebake_posts(
    session: Session,
    service: RebakeService,
    *,
    topic_id: int | None = None,
    invalidate_oneboxes: bool = False,
    invalidate_broken_images: bool = False,
    base_settings: Settings | None = None,
) -> BatchResult:
    """Rebake every live post in scope.

    Edit notifications are switched off for the duration of the run through a
    settings copy passed to the service with each call. A post that fails to
    rebake is logged and skipped; the loop carries on with the next one.

    Args:
        session: Session the posts are loaded from.
        service: Renders a single post.
        topic_id: Limit the run to one topic.
        invalidate_oneboxes: Ask the service to refetch link previews.
        invalidate_broken_images: Ask the service to drop cached broken images.
        base_settings: Settings to derive the override from. Defaults to the
            process settings.

    Returns:
        Counts of rebaked and failed posts.
    """
    base = base_settings or settings
    repo = PostRepository(session)
    total = repo.count(topic_id)
    result = BatchResult()

    with override_settings(base, disable_edit_notifications=True) as scoped:
        options = RebakeOptions(
            settings=scoped,
            invalidate_oneboxes=invalidate_oneboxes,
            invalidate_broken_images=invalidate_broken_images,
        )
        progress_every = max(1, scoped.rebake_progress_every)
        for post in repo.iter_posts(topic_id, batch_size=scoped.rebake_batch_size):
            try:
                service.rebake(post, options)
            except CollaboratorError:
                result.failed += 1
                logger.warning(
                    "Failed to rebake post topic=%s post_number=%s",
                    post.topic_id,
                    post.post_number,
                    exc_info=True,
                )
            else:
                result.processed += 1
            if result.total % progress_every == 0:
                logger.info("Rebaked %d/%d posts", result.total, total)

    logger.info("Rebake finished: %d rebaked, %d failed", result.processed, result.failed)
    return result
