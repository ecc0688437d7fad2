# scheduling/grid.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterable, Iterator, Tuple

from .errors import InvalidDateError, InvalidTimeError

DISPLAY_FORMAT = "%H:%M"
STORAGE_FORMAT = "%H:%M:%S"


def _minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def _parse_hhmm(value: str) -> time:
    return datetime.strptime(value.strip(), DISPLAY_FORMAT).time()


def enumerate_slots(open_: time, close: time, step_minutes: int) -> Tuple[time, ...]:
    """All bookable time points from ``open_`` to ``close`` inclusive."""
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")
    if close < open_:
        raise ValueError("close must not be earlier than open")
    out = []
    cur = _minutes(open_)
    end = _minutes(close)
    while cur <= end:
        out.append(time(cur // 60, cur % 60))
        cur += step_minutes
    return tuple(out)


def to_storage(hhmm: str) -> str:
    """'10:15' -> '10:15:00'"""
    return _parse_hhmm(hhmm).strftime(STORAGE_FORMAT)


def to_display(hhmmss: str) -> str:
    """'10:15:00' -> '10:15'"""
    return datetime.strptime(hhmmss.strip(), STORAGE_FORMAT).strftime(DISPLAY_FORMAT)


def format_time(t: time | None) -> str:
    if t is None:
        return ""
    return t.strftime(DISPLAY_FORMAT)


def coerce_time(value) -> time:
    """Accepts a ``time`` or a 'HH:mm' / 'HH:mm:ss' string."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidTimeError("Booking time is required", code="time_required")
    raw = value.strip()
    for fmt in (STORAGE_FORMAT, DISPLAY_FORMAT):
        try:
            return datetime.strptime(raw, fmt).time()
        except ValueError:
            continue
    raise InvalidTimeError(f"Time '{raw}' is not in HH:mm format", value=raw)


@dataclass(frozen=True)
class SlotGrid:
    open: time = time(10, 0)
    close: time = time(18, 45)
    step_minutes: int = 15
    slots: Tuple[time, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "slots", enumerate_slots(self.open, self.close, self.step_minutes))

    @classmethod
    def from_config(cls, cfg) -> "SlotGrid":
        return cls(
            open=_parse_hhmm(str(cfg.get("SLOT_OPEN", "10:00"))),
            close=_parse_hhmm(str(cfg.get("SLOT_CLOSE", "18:45"))),
            step_minutes=int(cfg.get("SLOT_STEP_MINUTES", 15)),
        )

    def __iter__(self) -> Iterator[time]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    def display_slots(self) -> list[str]:
        return [format_time(t) for t in self.slots]

    def contains(self, t: time) -> bool:
        if t.second or t.microsecond:
            return False
        m = _minutes(t)
        if m < _minutes(self.open) or m > _minutes(self.close):
            return False
        return (m - _minutes(self.open)) % self.step_minutes == 0

    def require(self, value) -> time:
        """Parse ``value`` and make sure it sits exactly on the grid."""
        t = coerce_time(value)
        if not self.contains(t):
            raise InvalidTimeError(
                f"Time {t.strftime(STORAGE_FORMAT)} is not a bookable slot "
                f"({format_time(self.open)}-{format_time(self.close)}, every {self.step_minutes} min)",
                value=t.strftime(STORAGE_FORMAT),
            )
        return t


def parse_slot(value, grid: SlotGrid) -> time:
    return grid.require(value)


def parse_iso_date(value, field_name: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidDateError(f"{field_name} is required", code="date_required", field=field_name)
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidDateError(f"{field_name} must be YYYY-MM-DD", field=field_name, value=str(value))


def date_span(d_from: date, d_to: date) -> Iterable[date]:
    d = d_from
    while d <= d_to:
        yield d
        d += timedelta(days=1)
