# scheduling/capacity.py
"""Slot capacity accounting.

Capacity here is a reporting figure: counts are never clamped, an overbooked
cell reports its real numbers. Whether a write may exceed a ceiling is decided
by the caller (see ``pool_usage``).
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, Optional

from .entities import BookingSettings

MODE_AGGREGATE = "aggregate"
MODE_DENTIST = "dentist"
MODE_BOTH = "both"


@dataclass(frozen=True)
class CapacityReport:
    mode: str
    booked: Optional[int] = None
    capacity: Optional[int] = None
    dentist_booked: Optional[int] = None
    dentist_cap: Optional[int] = None
    unassigned_booked: Optional[int] = None
    unassigned_cap: Optional[int] = None

    @property
    def over_capacity(self) -> bool:
        pairs = [
            (self.booked, self.capacity),
            (self.dentist_booked, self.dentist_cap),
            (self.unassigned_booked, self.unassigned_cap),
        ]
        return any(b is not None and c is not None and b > c for b, c in pairs)

    def to_dict(self) -> dict:
        out = {"mode": self.mode}
        if self.mode == MODE_AGGREGATE:
            out.update(booked=self.booked, capacity=self.capacity)
        else:
            out.update(dentist_booked=self.dentist_booked, dentist_cap=self.dentist_cap)
            if self.mode == MODE_BOTH:
                out.update(unassigned_booked=self.unassigned_booked, unassigned_cap=self.unassigned_cap)
        out["over_capacity"] = self.over_capacity
        return out


def counts_toward_capacity(b) -> bool:
    return b.status == "booked" and not b.is_deleted


def aggregate_capacity(active_dentist_count: int, settings: BookingSettings) -> int:
    return active_dentist_count * settings.slot_capacity_per_dentist + settings.slot_capacity_unassigned


def _active_in_cell(bookings: Iterable, day: date, at: time) -> list:
    return [
        b for b in bookings
        if b.booking_date == day and b.booking_time == at and counts_toward_capacity(b)
    ]


def capacity_for(
    day: date,
    at: time,
    bookings: Iterable,
    active_dentist_count: int,
    settings: BookingSettings,
    dentist_filter: Optional[int] = None,
    include_unassigned: bool = True,
) -> CapacityReport:
    """Counts for one (day, time) cell.

    ``bookings`` may hold rows of any cell; only active rows of this cell count.
    """
    active = _active_in_cell(bookings, day, at)

    if dentist_filter is None:
        return CapacityReport(
            mode=MODE_AGGREGATE,
            booked=len(active),
            capacity=aggregate_capacity(active_dentist_count, settings),
        )

    dentist_booked = sum(1 for b in active if b.dentist_id == dentist_filter)
    if not include_unassigned:
        return CapacityReport(
            mode=MODE_DENTIST,
            dentist_booked=dentist_booked,
            dentist_cap=settings.slot_capacity_per_dentist,
        )

    unassigned_booked = sum(1 for b in active if b.dentist_id is None)
    return CapacityReport(
        mode=MODE_BOTH,
        dentist_booked=dentist_booked,
        dentist_cap=settings.slot_capacity_per_dentist,
        unassigned_booked=unassigned_booked,
        unassigned_cap=settings.slot_capacity_unassigned,
    )


def pool_usage(
    day: date,
    at: time,
    bookings: Iterable,
    dentist_id: Optional[int],
    settings: BookingSettings,
    exclude_id: Optional[int] = None,
) -> tuple[int, int]:
    """(booked, cap) of the pool a booking with ``dentist_id`` draws from.

    ``exclude_id`` leaves out the booking being edited.
    """
    active = [b for b in _active_in_cell(bookings, day, at) if b.id != exclude_id]
    if dentist_id is None:
        return sum(1 for b in active if b.dentist_id is None), settings.slot_capacity_unassigned
    return sum(1 for b in active if b.dentist_id == dentist_id), settings.slot_capacity_per_dentist
