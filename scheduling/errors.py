# scheduling/errors.py
from __future__ import annotations


class SchedulingError(Exception):
    """Base for every error the booking core and its services raise.

    ``code`` is a stable machine value for API clients, ``message`` is the
    human-readable text shown to staff.
    """

    code = "scheduling_error"

    def __init__(self, message: str, code: str | None = None, **details):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details

    def __str__(self) -> str:
        return self.message


class ValidationError(SchedulingError):
    code = "validation_error"


class InvalidTimeError(ValidationError):
    code = "invalid_time"


class InvalidDateError(ValidationError):
    code = "invalid_date"


class StateError(SchedulingError):
    code = "invalid_state"


class NotFoundError(SchedulingError):
    code = "not_found"


class TransportError(SchedulingError):
    code = "transport_error"


class CapacityExceededError(SchedulingError):
    code = "capacity_exceeded"
