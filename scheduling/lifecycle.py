# scheduling/lifecycle.py
from __future__ import annotations
from enum import Enum

from .entities import BookingStatus
from .errors import StateError


class LifecycleState(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    DELETED = "deleted"


def state_of(status: str, is_deleted: bool) -> LifecycleState:
    if is_deleted:
        return LifecycleState.DELETED
    if status == BookingStatus.CANCELLED.value:
        return LifecycleState.CANCELLED
    return LifecycleState.ACTIVE


def _deleted(booking_id) -> StateError:
    return StateError(
        f"Booking {booking_id} has been deleted and can no longer be changed",
        code="booking_deleted",
        booking_id=booking_id,
    )


def ensure_can_update(booking) -> None:
    # cancelled bookings stay editable, only deletion is terminal
    if state_of(booking.status, booking.is_deleted) is LifecycleState.DELETED:
        raise _deleted(booking.id)


def ensure_can_cancel(booking) -> None:
    st = state_of(booking.status, booking.is_deleted)
    if st is LifecycleState.DELETED:
        raise _deleted(booking.id)
    if st is LifecycleState.CANCELLED:
        raise StateError(
            f"Booking {booking.id} is already cancelled",
            code="already_cancelled",
            booking_id=booking.id,
        )


def ensure_can_delete(booking) -> None:
    if booking.is_deleted:
        raise StateError(
            f"Booking {booking.id} is already deleted",
            code="already_deleted",
            booking_id=booking.id,
        )


def apply_cancel(booking) -> tuple[str, bool]:
    ensure_can_cancel(booking)
    return BookingStatus.CANCELLED.value, False


def apply_soft_delete(booking) -> tuple[str, bool]:
    ensure_can_delete(booking)
    return booking.status, True
