"""Maintenance commands for forum posts.

Examples:
  Renumber every topic by creation time:
    forum-maint reorder-posts

  Renumber a single topic:
    forum-maint reorder-posts --topic-id 42

  Remove all likes from one topic:
    forum-maint delete-likes --topic-id 42
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from forum_maint.core.settings import settings
from forum_maint.db.session import SessionLocal
from forum_maint.services.collaborators import MatchKind, load_collaborators
from forum_maint.services.find_replace import replace_in_posts
from forum_maint.services.post_actions import delete_all_flags, delete_all_likes
from forum_maint.services.rebake import rebake_posts
from forum_maint.services.renumber import RenumberStatus, reorder_posts_command
from forum_maint.services.uploads import fix_missing_uploads

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_MISCONFIGURED = 2


def _add_topic_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--topic-id",
        type=int,
        default=None,
        help="Limit the command to one topic.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="forum-maint",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    commands = parser.add_subparsers(dest="command", required=True)

    reorder = commands.add_parser(
        "reorder-posts",
        help="Renumber posts so post numbers follow creation time.",
    )
    _add_topic_option(reorder)

    likes = commands.add_parser("delete-likes", help="Delete all likes.")
    _add_topic_option(likes)

    flags = commands.add_parser("delete-flags", help="Delete all flags.")
    _add_topic_option(flags)

    rebake = commands.add_parser("rebake", help="Re-render posts.")
    _add_topic_option(rebake)
    rebake.add_argument("--invalidate-oneboxes", action="store_true")
    rebake.add_argument("--invalidate-broken-images", action="store_true")

    find_replace = commands.add_parser("find-replace", help="Replace text in posts.")
    find_replace.add_argument("pattern")
    find_replace.add_argument("replacement")
    find_replace.add_argument(
        "--regex",
        action="store_true",
        help="Treat PATTERN as a regular expression.",
    )
    find_replace.add_argument("--ignore-case", action="store_true")

    commands.add_parser(
        "fix-missing-uploads",
        help="Recreate missing uploads and update the posts using them.",
    )
    return parser


def _reorder(args: argparse.Namespace) -> int:
    status = reorder_posts_command(args.topic_id, SessionLocal)
    print(status)
    return EXIT_OK if status is RenumberStatus.COMMITTED else EXIT_FAILED


def _delete_likes(args: argparse.Namespace) -> int:
    with SessionLocal() as session:
        deleted = delete_all_likes(session, args.topic_id)
    print(f"Deleted {deleted} likes")
    return EXIT_OK


def _delete_flags(args: argparse.Namespace) -> int:
    with SessionLocal() as session:
        deleted = delete_all_flags(session, args.topic_id)
    print(f"Deleted {deleted} flags")
    return EXIT_OK


def _rebake(args: argparse.Namespace) -> int:
    service = load_collaborators(settings.collaborators_module).rebake_service
    if service is None:
        print("No rebake_service configured (COLLABORATORS_MODULE)", file=sys.stderr)
        return EXIT_MISCONFIGURED
    with SessionLocal() as session:
        result = rebake_posts(
            session,
            service,
            topic_id=args.topic_id,
            invalidate_oneboxes=args.invalidate_oneboxes,
            invalidate_broken_images=args.invalidate_broken_images,
        )
    print(f"Rebaked {result.processed} posts, {result.failed} failed")
    return EXIT_OK if not result.failed else EXIT_FAILED


def _find_replace(args: argparse.Namespace) -> int:
    service = load_collaborators(settings.collaborators_module).rewrite_service
    if service is None:
        print("No rewrite_service configured (COLLABORATORS_MODULE)", file=sys.stderr)
        return EXIT_MISCONFIGURED
    kind = MatchKind.REGEX if args.regex else MatchKind.LITERAL
    try:
        result = replace_in_posts(
            service,
            args.pattern,
            args.replacement,
            kind,
            ignore_case=args.ignore_case,
        )
    except ValueError as exc:
        print(f"[find-replace] ERROR: {exc}", file=sys.stderr)
        return EXIT_MISCONFIGURED
    print(f"Rewrote {result.processed} posts, {result.failed} failed")
    return EXIT_OK if not result.failed else EXIT_FAILED


def _fix_missing_uploads(args: argparse.Namespace) -> int:
    collaborators = load_collaborators(settings.collaborators_module)
    if collaborators.upload_service is None or collaborators.rewrite_service is None:
        print(
            "upload_service and rewrite_service must be configured (COLLABORATORS_MODULE)",
            file=sys.stderr,
        )
        return EXIT_MISCONFIGURED
    result = fix_missing_uploads(collaborators.upload_service, collaborators.rewrite_service)
    print(
        f"Fixed {result.processed} uploads, {result.skipped} not recoverable, "
        f"{result.failed} failed"
    )
    return EXIT_OK if not result.failed else EXIT_FAILED


_HANDLERS = {
    "reorder-posts": _reorder,
    "delete-likes": _delete_likes,
    "delete-flags": _delete_flags,
    "rebake": _rebake,
    "find-replace": _find_replace,
    "fix-missing-uploads": _fix_missing_uploads,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return _HANDLERS[args.command](args)


if __name__ == "__main__":
    raise SystemExit(main())
