"""Error taxonomy surfaced by the assignment engine."""

from __future__ import annotations


class AssignmentError(Exception):
    """Base class for assignment engine failures."""


class NotFoundError(AssignmentError, LookupError):
    """A referenced period or setting does not exist."""

    def __init__(self, what: str) -> None:
        super().__init__(f"{what} not found")
        self.what = what


class ValidationError(AssignmentError, ValueError):
    """Input rejected before any packing work was done."""


class InternalServerError(AssignmentError, RuntimeError):
    """Accounting or resolver invariant broken; indicates a logic defect."""
