from __future__ import annotations
from datetime import date, time

from scheduling.capacity import (
    MODE_AGGREGATE, MODE_BOTH, MODE_DENTIST, aggregate_capacity, capacity_for, pool_usage,
)
from scheduling.entities import BookingSettings, BookingView

DAY = date(2025, 9, 5)
AT = time(10, 0)
A, B = 1, 2
SETTINGS = BookingSettings(slot_capacity_per_dentist=2, slot_capacity_unassigned=1)


def _b(id_, dentist_id=None, status="booked", is_deleted=False, at=AT, day=DAY):
    return BookingView(id=id_, booking_date=day, booking_time=at, status=status,
                       is_deleted=is_deleted, dentist_id=dentist_id, walkin_name_en="x")


def _cell():
    return [
        _b(1, A), _b(2, A), _b(3, B),
        _b(4, None, status="cancelled"),
        _b(5, A, is_deleted=True),
        _b(6, A, at=time(10, 15)),
        _b(7, A, day=date(2025, 9, 6)),
    ]


def test_aggregate_capacity_formula():
    assert aggregate_capacity(3, SETTINGS) == 7
    assert aggregate_capacity(0, SETTINGS) == 1


def test_aggregate_mode_counts_only_active_rows_of_the_cell():
    rep = capacity_for(DAY, AT, _cell(), active_dentist_count=3, settings=SETTINGS)
    assert rep.mode == MODE_AGGREGATE
    assert (rep.booked, rep.capacity) == (3, 7)
    assert rep.over_capacity is False


def test_dentist_only_mode():
    rep = capacity_for(DAY, AT, _cell(), 3, SETTINGS, dentist_filter=A, include_unassigned=False)
    assert rep.mode == MODE_DENTIST
    assert (rep.dentist_booked, rep.dentist_cap) == (2, 2)
    assert rep.unassigned_booked is None
    assert rep.to_dict() == {"mode": "dentist", "dentist_booked": 2, "dentist_cap": 2, "over_capacity": False}


def test_both_pools_mode():
    rep = capacity_for(DAY, AT, _cell(), 3, SETTINGS, dentist_filter=B, include_unassigned=True)
    assert rep.mode == MODE_BOTH
    assert (rep.dentist_booked, rep.dentist_cap) == (1, 2)
    assert (rep.unassigned_booked, rep.unassigned_cap) == (0, 1)


def test_overbooking_is_reported_not_clamped():
    rows = [_b(i, None) for i in range(1, 4)]
    rep = capacity_for(DAY, AT, rows, 0, SETTINGS)
    assert (rep.booked, rep.capacity) == (3, 1)
    assert rep.over_capacity is True


def test_pool_usage_separates_pools_and_skips_edited_row():
    rows = _cell() + [_b(8, None)]
    assert pool_usage(DAY, AT, rows, A, SETTINGS) == (2, 2)
    assert pool_usage(DAY, AT, rows, A, SETTINGS, exclude_id=1) == (1, 2)
    assert pool_usage(DAY, AT, rows, None, SETTINGS) == (1, 1)


def test_unassigned_booking_leaves_dentist_pools_alone():
    before = {d: capacity_for(DAY, AT, _cell(), 3, SETTINGS, dentist_filter=d) for d in (A, B, 3)}
    after_rows = _cell() + [_b(20, None), _b(21, None)]
    for d, rep in before.items():
        after = capacity_for(DAY, AT, after_rows, 3, SETTINGS, dentist_filter=d)
        assert after.dentist_booked == rep.dentist_booked
        assert after.dentist_cap == rep.dentist_cap
        assert after.unassigned_booked == rep.unassigned_booked + 2


def test_dentist_booking_leaves_unassigned_pool_alone():
    rows = _cell() + [_b(20, None)]
    before = capacity_for(DAY, AT, rows, 3, SETTINGS, dentist_filter=B)
    after = capacity_for(DAY, AT, rows + [_b(21, A), _b(22, B)], 3, SETTINGS, dentist_filter=B)
    assert (after.unassigned_booked, after.unassigned_cap) == (before.unassigned_booked, before.unassigned_cap)
    assert after.dentist_booked == before.dentist_booked + 1
