"""Booking slot grid, capacity accounting, lifecycle rules and query helpers.

Pure functions and value objects only; persistence lives in the blueprints.
"""
from .errors import (  # noqa: F401
    SchedulingError, ValidationError, InvalidTimeError, InvalidDateError,
    StateError, NotFoundError, TransportError, CapacityExceededError,
)
from .grid import SlotGrid, enumerate_slots, to_storage, to_display  # noqa: F401
from .entities import (  # noqa: F401
    BookingSettings, BookingStatus, BookingDraft, BookingView, Dentist, Service,
    PatientLite, Registered, WalkIn, OtherServices, patient_ref_from_fields,
)
from .capacity import CapacityReport, capacity_for  # noqa: F401
