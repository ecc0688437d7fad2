from __future__ import annotations
from datetime import date, time
import pytest

from scheduling import lifecycle
from scheduling.entities import BookingView
from scheduling.errors import StateError
from scheduling.lifecycle import LifecycleState, state_of


def _b(status="booked", is_deleted=False):
    return BookingView(id=10, booking_date=date(2025, 9, 5), booking_time=time(10, 0),
                       status=status, is_deleted=is_deleted)


def test_state_of():
    assert state_of("booked", False) is LifecycleState.ACTIVE
    assert state_of("cancelled", False) is LifecycleState.CANCELLED
    assert state_of("cancelled", True) is LifecycleState.DELETED
    assert state_of("booked", True) is LifecycleState.DELETED


def test_cancel_then_delete():
    b = _b()
    b.status, b.is_deleted = lifecycle.apply_cancel(b)
    assert (b.status, b.is_deleted) == ("cancelled", False)
    b.status, b.is_deleted = lifecycle.apply_soft_delete(b)
    # status is kept, deletion is a flag on top
    assert (b.status, b.is_deleted) == ("cancelled", True)


def test_active_can_be_deleted_directly():
    b = _b()
    assert lifecycle.apply_soft_delete(b) == ("booked", True)


@pytest.mark.parametrize("b,fn,code", [
    (_b("cancelled"), lifecycle.apply_cancel, "already_cancelled"),
    (_b(is_deleted=True), lifecycle.apply_cancel, "booking_deleted"),
    (_b(is_deleted=True), lifecycle.apply_soft_delete, "already_deleted"),
    (_b(is_deleted=True), lifecycle.ensure_can_update, "booking_deleted"),
])
def test_illegal_transitions(b, fn, code):
    with pytest.raises(StateError) as ei:
        fn(b)
    assert ei.value.code == code
    assert ei.value.details["booking_id"] == 10


def test_cancelled_stays_editable():
    lifecycle.ensure_can_update(_b("cancelled"))
