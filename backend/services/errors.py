"""Error kinds raised by the voting services.

The API layer maps each kind to an HTTP status using ``status_code``.
"""

from __future__ import annotations


class VotingError(Exception):
    status_code = 400
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class NotFoundError(VotingError):
    status_code = 404
    kind = "not_found"


class InvalidInputError(VotingError):
    status_code = 400
    kind = "invalid_input"


class InvalidStateError(VotingError):
    status_code = 400
    kind = "invalid_state"


class ForbiddenError(VotingError):
    status_code = 403
    kind = "forbidden"


class UnauthorizedError(ForbiddenError):
    """Caller is not the organizer of the event it is trying to manage."""

    kind = "unauthorized"


class ConflictError(VotingError):
    status_code = 409
    kind = "conflict"


class LimitExceededError(VotingError):
    status_code = 400
    kind = "limit_exceeded"


class DuplicateRecordError(ConflictError):
    """Raised by a store when an insert hits a uniqueness constraint."""


__all__ = [
    "VotingError",
    "NotFoundError",
    "InvalidInputError",
    "InvalidStateError",
    "ForbiddenError",
    "UnauthorizedError",
    "ConflictError",
    "LimitExceededError",
    "DuplicateRecordError",
]
