# scheduling/query.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, time
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .capacity import CapacityReport, capacity_for
from .entities import BookingSettings, BookingView
from .errors import ValidationError
from .grid import SlotGrid, format_time

Cell = Tuple[date, time]

STATUS_ALL = "all"
STATUS_FILTERS = ("all", "booked", "cancelled")
GROUP_BY_DATE = "date"
GROUP_BY_DENTIST = "dentist"


def _sort_key(b) -> tuple:
    return (b.booking_date, b.booking_time, b.id)


# ---------- timetable ----------
def cell_index(bookings: Iterable[BookingView]) -> Dict[Cell, List[BookingView]]:
    """(date, time) -> bookings in that cell, each list ordered by id."""
    index: Dict[Cell, List[BookingView]] = {}
    for b in sorted(bookings, key=_sort_key):
        index.setdefault((b.booking_date, b.booking_time), []).append(b)
    return index


def cell_bookings(
    index: Dict[Cell, List[BookingView]],
    day: date,
    at: time,
    dentist_filter: Optional[int] = None,
    include_unassigned: bool = True,
) -> List[BookingView]:
    rows = index.get((day, at), [])
    if dentist_filter is None:
        return list(rows)
    if include_unassigned:
        return [b for b in rows if b.dentist_id == dentist_filter or b.dentist_id is None]
    return [b for b in rows if b.dentist_id == dentist_filter]


class DayColumns:
    """Day columns of the multi-day timetable.

    Column 0 always follows the anchor date; the others are set independently
    and may repeat or be out of order.
    """

    def __init__(self, anchor: date, extra: Iterable[date] = ()):
        self._days: List[date] = [anchor, *extra]

    @property
    def anchor(self) -> date:
        return self._days[0]

    @property
    def days(self) -> List[date]:
        return list(self._days)

    def __len__(self) -> int:
        return len(self._days)

    def set_anchor(self, d: date) -> None:
        self._days[0] = d

    def add_day(self, d: Optional[date] = None) -> None:
        self._days.append(d or self._days[-1])

    def set_day(self, idx: int, d: date) -> None:
        if idx == 0:
            self.set_anchor(d)
        else:
            self._days[idx] = d

    def remove_day(self, idx: int) -> None:
        if idx == 0:
            raise ValidationError("The first day column follows the anchor date and cannot be removed",
                                  code="anchor_locked")
        del self._days[idx]

    def query_range(self) -> Tuple[date, date]:
        return min(self._days), max(self._days)


@dataclass
class TimetableCell:
    day: date
    time: time
    bookings: List[BookingView]
    capacity: CapacityReport

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "time": format_time(self.time),
            "capacity": self.capacity.to_dict(),
            "bookings": [b.to_dict() for b in self.bookings],
        }


def timetable(
    days: Sequence[date],
    grid: SlotGrid,
    bookings: Iterable[BookingView],
    active_dentist_count: int,
    settings: BookingSettings,
    dentist_filter: Optional[int] = None,
    include_unassigned: bool = True,
) -> List[List[TimetableCell]]:
    """One row per grid slot, one cell per day column."""
    index = cell_index(bookings)
    rows: List[List[TimetableCell]] = []
    for at in grid:
        row = []
        for day in days:
            in_cell = index.get((day, at), [])
            row.append(TimetableCell(
                day=day,
                time=at,
                bookings=cell_bookings(index, day, at, dentist_filter, include_unassigned),
                capacity=capacity_for(day, at, in_cell, active_dentist_count, settings,
                                      dentist_filter, include_unassigned),
            ))
        rows.append(row)
    return rows


# ---------- search ----------
def matches_search(b: BookingView, term: Optional[str]) -> bool:
    """Case-insensitive substring match on HN, walk-in names and patient search text.

    No minimum length is applied here; callers decide when a term is long
    enough to be used.
    """
    t = (term or "").strip().casefold()
    if not t:
        return True
    haystack = (b.hn, b.walkin_name_th, b.walkin_name_en, b.patient_search_text)
    return any(h and t in h.casefold() for h in haystack)


# ---------- management list ----------
@dataclass
class ManageFilters:
    date_from: date
    date_to: date
    dentist_id: Optional[int] = None
    status: str = STATUS_ALL
    q: Optional[str] = None
    include_deleted: bool = False

    def __post_init__(self):
        if self.status not in STATUS_FILTERS:
            raise ValidationError(f"status must be one of {', '.join(STATUS_FILTERS)}",
                                  code="invalid_status")
        if self.date_to < self.date_from:
            self.date_from, self.date_to = self.date_to, self.date_from

    def matches(self, b: BookingView) -> bool:
        if not (self.date_from <= b.booking_date <= self.date_to):
            return False
        if not self.include_deleted and b.is_deleted:
            return False
        if self.dentist_id is not None and b.dentist_id != self.dentist_id:
            return False
        if self.status != STATUS_ALL and b.status != self.status:
            return False
        return matches_search(b, self.q)


@dataclass
class Page:
    rows: List[BookingView]
    total: int
    page: int
    page_size: int

    def to_dict(self) -> dict:
        return {
            "rows": [b.to_dict() for b in self.rows],
            "meta": {"page": self.page, "page_size": self.page_size, "total": self.total},
        }


def list_bookings(bookings: Iterable[BookingView], filters: ManageFilters,
                  page: int = 0, page_size: int = 20) -> Page:
    """Zero-based page ``page`` holds records [page*size, page*size + size)."""
    if page < 0:
        raise ValidationError("page must be >= 0", code="invalid_page")
    if page_size < 1:
        raise ValidationError("page_size must be >= 1", code="invalid_page_size")
    matched = sorted((b for b in bookings if filters.matches(b)), key=_sort_key)
    start = page * page_size
    return Page(rows=matched[start:start + page_size], total=len(matched), page=page, page_size=page_size)


# ---------- printable summary ----------
@dataclass
class SummaryFilters:
    date_from: date
    date_to: date
    dentist_id: Optional[int] = None
    include_cancelled: bool = False
    include_unassigned: Optional[bool] = True

    def __post_init__(self):
        if self.date_to < self.date_from:
            self.date_from, self.date_to = self.date_to, self.date_from

    def matches(self, b: BookingView) -> bool:
        if b.is_deleted or not (self.date_from <= b.booking_date <= self.date_to):
            return False
        if not self.include_cancelled and b.status != "booked":
            return False
        if self.dentist_id is not None:
            if self.include_unassigned:
                return b.dentist_id == self.dentist_id or b.dentist_id is None
            return b.dentist_id == self.dentist_id
        if self.include_unassigned is False:
            return b.dentist_id is not None
        return True


def summary_rows(bookings: Iterable[BookingView], filters: SummaryFilters) -> List[BookingView]:
    return sorted((b for b in bookings if filters.matches(b)), key=_sort_key)


@dataclass
class SummaryGroup:
    key: str
    rows: List[BookingView] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"key": self.key, "count": len(self.rows), "rows": [b.to_dict() for b in self.rows]}


def group_summary(rows: Iterable[BookingView], by: str = GROUP_BY_DATE) -> List[SummaryGroup]:
    """Groups keyed by ISO date or dentist label; rows keep (date, time, id) order."""
    if by not in (GROUP_BY_DATE, GROUP_BY_DENTIST):
        raise ValidationError("group_by must be 'date' or 'dentist'", code="invalid_group_by")
    groups: Dict[str, List[BookingView]] = {}
    for b in rows:
        key = b.booking_date.isoformat() if by == GROUP_BY_DATE else b.dentist_label
        groups.setdefault(key, []).append(b)
    return [
        SummaryGroup(key=k, rows=sorted(groups[k], key=_sort_key))
        for k in sorted(groups)
    ]
