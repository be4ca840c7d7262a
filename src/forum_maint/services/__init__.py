"""Maintenance services operating on forum posts."""

from .errors import CollaboratorError, ConstraintViolation, MaintenanceError, TransactionAborted
from .renumber import RenumberResult, RenumberStatus, renumber_posts, reorder_posts_command

__all__ = [
    "CollaboratorError",
    "ConstraintViolation",
    "MaintenanceError",
    "TransactionAborted",
    "RenumberResult",
    "RenumberStatus",
    "renumber_posts",
    "reorder_posts_command",
]
