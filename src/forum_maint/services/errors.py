"""Exceptions raised by maintenance tasks."""

from __future__ import annotations


class MaintenanceError(RuntimeError):
    """Base exception for maintenance task failures."""


class ConstraintViolation(MaintenanceError):
    """Raised when post numbering is in a state the renumbering cannot start from.

    This signals corrupt data or a defect in the renumbering itself, never a
    condition worth retrying.
    """


class TransactionAborted(MaintenanceError):
    """Raised when the store rolled back a renumbering transaction.

    Nothing was changed; the whole operation is safe to retry.
    """


class CollaboratorError(MaintenanceError):
    """Raised by external services (rebake, rewrite, uploads) for one post."""
