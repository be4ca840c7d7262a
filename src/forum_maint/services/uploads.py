"""Repair post references to uploads whose files went missing."""

from __future__ import annotations

import logging

from forum_maint.services.collaborators import (
    BatchResult,
    TextRewriteService,
    UploadReconciliationService,
)
from forum_maint.services.errors import CollaboratorError

__all__ = ["fix_missing_uploads"]

logger = logging.getLogger(__name__)


def fix_missing_uploads(
    upload_service: UploadReconciliationService,
    rewrite_service: TextRewriteService,
) -> BatchResult:
    """Recreate missing uploads and point posts at their canonical URL.

    References that cannot be recreated are counted as skipped and left in
    place.
    """
    result = BatchResult()
    for missing in upload_service.find_missing_references():
        post = missing.post
        try:
            canonical_url = upload_service.recreate(missing.stored_path)
            if canonical_url is None:
                logger.info(
                    "Could not recreate %s for post topic=%s post_number=%s",
                    missing.stored_path,
                    post.topic_id,
                    post.post_number,
                )
                result.skipped += 1
                continue
            if canonical_url != missing.source_url:
                rewrite_service.apply_rewrite(
                    post, post.raw.replace(missing.source_url, canonical_url)
                )
        except CollaboratorError:
            result.failed += 1
            logger.warning(
                "Failed to fix upload %s in post topic=%s post_number=%s",
                missing.source_url,
                post.topic_id,
                post.post_number,
                exc_info=True,
            )
        else:
            result.processed += 1

    logger.info(
        "Missing uploads: %d fixed, %d not recoverable, %d failed",
        result.processed,
        result.skipped,
        result.failed,
    )
    return result
