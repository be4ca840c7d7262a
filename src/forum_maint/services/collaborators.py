"""Interfaces of the external services batch tasks drive.

Rendering, text matching and upload storage live outside this package. Tasks
only see the protocols below; a deployment supplies implementations through
the module named by ``COLLABORATORS_MODULE``.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from forum_maint.core.settings import Settings
from forum_maint.models import Post

__all__ = [
    "BatchResult",
    "Collaborators",
    "MatchKind",
    "MissingUpload",
    "RebakeOptions",
    "RebakeService",
    "TextRewriteService",
    "UploadReconciliationService",
    "load_collaborators",
]


class MatchKind(StrEnum):
    """How a search pattern is interpreted."""

    LITERAL = "literal"
    REGEX = "regex"


@dataclass(frozen=True)
class RebakeOptions:
    """Options handed to the rebake service for one batch run."""

    settings: Settings
    invalidate_oneboxes: bool = False
    invalidate_broken_images: bool = False


@dataclass(frozen=True)
class MissingUpload:
    """A post referencing an upload whose stored file is gone."""

    post: Post
    source_url: str
    stored_path: str


@dataclass
class BatchResult:
    """Tally of a per-post batch loop."""

    processed: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.processed + self.skipped + self.failed


class RebakeService(Protocol):
    def rebake(self, post: Post, options: RebakeOptions) -> None:
        """Re-render ``post``; raise ``CollaboratorError`` on failure."""


class TextRewriteService(Protocol):
    def find_matches(
        self, pattern: str, kind: MatchKind, *, ignore_case: bool = False
    ) -> Iterable[Post]:
        """Yield posts whose raw content matches ``pattern``."""

    def apply_rewrite(self, post: Post, new_content: str) -> None:
        """Store ``new_content`` as the post's raw content and re-render it."""


class UploadReconciliationService(Protocol):
    def find_missing_references(self) -> Iterable[MissingUpload]:
        """Yield every post reference to an upload that no longer exists."""

    def recreate(self, stored_path: str) -> str | None:
        """Recreate the upload from ``stored_path`` and return its canonical URL."""


@dataclass(frozen=True)
class Collaborators:
    rebake_service: RebakeService | None = None
    rewrite_service: TextRewriteService | None = None
    upload_service: UploadReconciliationService | None = None


def load_collaborators(module_path: str | None) -> Collaborators:
    """Import ``module_path`` and pick up the services it exposes.

    Attributes the module does not define are left as ``None``.
    """
    if not module_path:
        return Collaborators()
    module = importlib.import_module(module_path)
    return Collaborators(
        rebake_service=getattr(module, "rebake_service", None),
        rewrite_service=getattr(module, "rewrite_service", None),
        upload_service=getattr(module, "upload_service", None),
    )
