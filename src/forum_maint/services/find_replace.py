"""Find and replace text across posts."""

from __future__ import annotations

import logging
import re

from forum_maint.services.collaborators import BatchResult, MatchKind, TextRewriteService
from forum_maint.services.errors import CollaboratorError

__all__ = ["compile_pattern", "replace_in_posts"]

logger = logging.getLogger(__name__)


def compile_pattern(pattern: str, kind: MatchKind, *, ignore_case: bool = False) -> re.Pattern[str]:
    """Compile ``pattern`` as a regex, escaping it first when it is literal.

    Raises:
        ValueError: If a regex pattern is empty or does not compile.
    """
    if not pattern:
        raise ValueError("Search pattern must not be empty")
    source = pattern if kind is MatchKind.REGEX else re.escape(pattern)
    try:
        return re.compile(source, re.IGNORECASE if ignore_case else 0)
    except re.error as exc:
        raise ValueError(f"Invalid regular expression {pattern!r}: {exc}") from exc


def replace_in_posts(
    service: TextRewriteService,
    pattern: str,
    replacement: str,
    kind: MatchKind = MatchKind.LITERAL,
    *,
    ignore_case: bool = False,
) -> BatchResult:
    """Rewrite every post the service matches for ``pattern``.

    Literal replacements are inserted verbatim; regex replacements may use
    group references. Posts whose content would not change are skipped.
    """
    matcher = compile_pattern(pattern, kind, ignore_case=ignore_case)
    result = BatchResult()

    for post in service.find_matches(pattern, kind, ignore_case=ignore_case):
        if kind is MatchKind.REGEX:
            new_raw = matcher.sub(replacement, post.raw)
        else:
            new_raw = matcher.sub(lambda _match: replacement, post.raw)
        if new_raw == post.raw:
            result.skipped += 1
            continue
        try:
            service.apply_rewrite(post, new_raw)
        except CollaboratorError:
            result.failed += 1
            logger.warning(
                "Failed to rewrite post topic=%s post_number=%s",
                post.topic_id,
                post.post_number,
                exc_info=True,
            )
        else:
            result.processed += 1

    logger.info(
        "Replaced %r in %d posts (%d unchanged, %d failed)",
        pattern,
        result.processed,
        result.skipped,
        result.failed,
    )
    return result
