"""
Error kinds raised by the queue engine.

Every error carries a stable ``code`` that the service facade hands back to
callers and that the HTTP layer maps onto a status code.
"""

from typing import Any


class QueueError(Exception):
    """Base class for queue engine errors."""

    code: str = "QUEUE_ERROR"
    status_code: int = 400
    default_message: str = "Queue operation failed"

    def __init__(self, message: str | None = None, **context: Any):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class NotFound(QueueError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class AlreadySelected(QueueError):
    code = "ALREADY_SELECTED"
    status_code = 409
    default_message = "Candidate already queued for this company"


class CompanyUnavailable(QueueError):
    code = "COMPANY_UNAVAILABLE"
    status_code = 409
    default_message = "Company is not accepting new candidates"


class InvalidState(QueueError):
    code = "INVALID_STATE"
    status_code = 409
    default_message = "Operation not allowed in the interview's current status"


class AccessDenied(QueueError):
    code = "ACCESS_DENIED"
    status_code = 403
    default_message = "Committee member is not authorized for this room"


class RoomBusy(QueueError):
    code = "ROOM_BUSY"
    status_code = 409
    default_message = "An interview is already in progress in this room"


class NotOwner(QueueError):
    code = "NOT_OWNER"
    status_code = 403
    default_message = "Interview belongs to another candidate"


class NoRoomAssigned(QueueError):
    code = "NO_ROOM_ASSIGNED"
    status_code = 409
    default_message = "No room is assigned to this company"


class StoreUnavailable(QueueError):
    code = "STORE_UNAVAILABLE"
    status_code = 503
    default_message = "Interview store temporarily unavailable"
