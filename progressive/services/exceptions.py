"""Domain errors raised by the scheduling engine.

Routers translate these into HTTP responses; nothing in the engine retries.
"""
from __future__ import annotations

from typing import Any


class ProgressiveError(Exception):
    """Base class for every error the engine reports to its caller."""

    code = "progressive_error"
    status_code = 500

    def __init__(self, message: str, *, field: str | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ProgramValidationError(ProgressiveError):
    """Input rejected before any storage was touched."""

    code = "validation_error"
    status_code = 422


class NotFoundError(ProgressiveError):
    """Program or day does not exist or belongs to another owner."""

    code = "not_found"
    status_code = 404


class StateConflictError(ProgressiveError):
    """Day is no longer planned, or is the wrong kind of day for the operation."""

    code = "state_conflict"
    status_code = 409
