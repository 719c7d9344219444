# app/core/errors.py
from typing import Optional


class StudioError(Exception):
    """Base class for errors raised by the booking services.

    Each subclass carries the HTTP status the API answers with and a short
    machine readable ``code``; the exception handlers in ``app.main`` render
    them as ``{"detail": ..., "error": code}``.
    """

    status_code = 400
    code = "studio_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(StudioError):
    code = "validation_failed"

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail)
        self.field = field


class InvalidTimeFormat(ValidationFailed, ValueError):
    code = "invalid_time"

    def __init__(self, value: str):
        super().__init__(f"Invalid time: {value!r}", field="time")
        self.value = value


class PreconditionFailed(StudioError):
    status_code = 403
    code = "precondition_failed"

    def __init__(self, detail: str, remediation: str):
        super().__init__(detail)
        self.remediation = remediation


class PermissionDenied(StudioError):
    status_code = 403
    code = "permission_denied"


class NotFound(StudioError):
    status_code = 404
    code = "not_found"


class SlotNotAvailable(StudioError):
    code = "slot_not_available"


class AlreadyExists(StudioError):
    status_code = 409
    code = "already_exists"


class SlotAlreadyBooked(StudioError):
    status_code = 409
    code = "slot_already_booked"


class AvailabilityConflict(StudioError):
    status_code = 409
    code = "availability_conflict"


class InvalidStatusTransition(StudioError):
    code = "invalid_status_transition"
