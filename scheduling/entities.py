# scheduling/entities.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from .errors import ValidationError
from .grid import SlotGrid, format_time, parse_iso_date, parse_slot

UNASSIGNED_LABEL = "Unassigned"


class BookingStatus(str, Enum):
    BOOKED = "booked"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Dentist:
    id: int
    name: str
    is_active: bool = True
    dentist_code: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class Service:
    id: int
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class BookingSettings:
    slot_capacity_per_dentist: int
    slot_capacity_unassigned: int

    def __post_init__(self):
        if self.slot_capacity_per_dentist < 0 or self.slot_capacity_unassigned < 0:
            raise ValidationError("Slot capacities must be >= 0", code="invalid_settings")


@dataclass(frozen=True)
class PatientLite:
    id: int
    hn: str
    name_th: Optional[str] = None
    name_en: Optional[str] = None
    phone: Optional[str] = None


# ---------- patient reference: registered patient or walk-in ----------
def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Registered:
    patient_id: int


@dataclass(frozen=True)
class WalkIn:
    name_th: Optional[str] = None
    name_en: Optional[str] = None
    phone: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "name_th", _clean(self.name_th))
        object.__setattr__(self, "name_en", _clean(self.name_en))
        object.__setattr__(self, "phone", _clean(self.phone))
        if not (self.name_th or self.name_en):
            raise ValidationError("Walk-in bookings need a Thai or English name", code="patient_required")


PatientRef = Union[Registered, WalkIn]


def patient_ref_from_fields(
    patient_id: Optional[int] = None,
    walkin_name_th: Optional[str] = None,
    walkin_name_en: Optional[str] = None,
    walkin_phone: Optional[str] = None,
) -> PatientRef:
    """Build the patient side of a booking. Exactly one case may be given."""
    has_walkin = any(_clean(v) for v in (walkin_name_th, walkin_name_en, walkin_phone))
    if patient_id is not None:
        if has_walkin:
            raise ValidationError(
                "Choose either a registered patient or walk-in details, not both",
                code="patient_ambiguous",
            )
        return Registered(int(patient_id))
    if not has_walkin:
        raise ValidationError("Select a patient or enter walk-in details", code="patient_required")
    return WalkIn(walkin_name_th, walkin_name_en, walkin_phone)


# ---------- free-text services ----------
class OtherServices(Sequence[str]):
    """Ordered set of free-text services compared case-insensitively.

    Entries are trimmed, empty strings are dropped and the first spelling of a
    duplicate wins.
    """

    def __init__(self, items: Iterable[Optional[str]] | None = None):
        self._items: List[str] = []
        self._keys: set[str] = set()
        for it in items or ():
            self.add(it)

    @staticmethod
    def _key(value: str) -> str:
        return value.casefold()

    def add(self, value: Optional[str]) -> bool:
        v = (value or "").strip()
        if not v or self._key(v) in self._keys:
            return False
        self._keys.add(self._key(v))
        self._items.append(v)
        return True

    def discard(self, value: str) -> None:
        k = self._key((value or "").strip())
        if k in self._keys:
            self._keys.remove(k)
            self._items = [x for x in self._items if self._key(x) != k]

    def __contains__(self, value) -> bool:
        return isinstance(value, str) and self._key(value.strip()) in self._keys

    def __getitem__(self, idx):
        return self._items[idx]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __eq__(self, other) -> bool:
        if isinstance(other, OtherServices):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return self._items == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"OtherServices({self._items!r})"

    def to_list(self) -> List[str]:
        return list(self._items)


def _dedup_ids(ids: Iterable[int] | None) -> List[int]:
    out: List[int] = []
    for i in ids or ():
        i = int(i)
        if i not in out:
            out.append(i)
    return out


# ---------- write side ----------
@dataclass
class BookingDraft:
    """Fields a staff member submits when creating or editing a booking."""

    booking_date: Optional[date]
    booking_time: Optional[time]
    patient: Optional[PatientRef] = None
    dentist_id: Optional[int] = None
    service_ids: List[int] = field(default_factory=list)
    other_services: OtherServices = field(default_factory=OtherServices)
    note: Optional[str] = None

    def __post_init__(self):
        self.service_ids = _dedup_ids(self.service_ids)
        if not isinstance(self.other_services, OtherServices):
            self.other_services = OtherServices(self.other_services)
        self.note = _clean(self.note)

    def validate(self, grid: SlotGrid, *, require_patient: bool = True) -> "BookingDraft":
        if self.booking_date is None:
            raise ValidationError("Booking date is required", code="date_required")
        self.booking_date = parse_iso_date(self.booking_date, "booking_date")
        if self.booking_time is None:
            raise ValidationError("Booking time is required", code="time_required")
        self.booking_time = parse_slot(self.booking_time, grid)
        if not self.service_ids and not self.other_services:
            raise ValidationError(
                "Select at least one service or add an other service",
                code="services_required",
            )
        if require_patient and self.patient is None:
            raise ValidationError("Select a patient or enter walk-in details", code="patient_required")
        return self


# ---------- read side ----------
@dataclass
class BookingView:
    id: int
    booking_date: date
    booking_time: time
    status: str = BookingStatus.BOOKED.value
    is_deleted: bool = False
    dentist_id: Optional[int] = None
    patient_id: Optional[int] = None
    hn: Optional[str] = None
    patient_name_th: Optional[str] = None
    patient_name_en: Optional[str] = None
    patient_search_text: Optional[str] = None
    patient_phone: Optional[str] = None
    walkin_name_th: Optional[str] = None
    walkin_name_en: Optional[str] = None
    walkin_phone: Optional[str] = None
    dentist_name: Optional[str] = None
    dentist_code: Optional[str] = None
    service_ids: List[int] = field(default_factory=list)
    service_names: List[str] = field(default_factory=list)
    other_services: List[str] = field(default_factory=list)
    note: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == BookingStatus.BOOKED.value and not self.is_deleted

    @property
    def patient_label(self) -> str:
        if self.hn:
            name = self.patient_name_th or self.patient_name_en or ""
            return f"{self.hn} {name}".strip()
        return f"No HN - {(self.walkin_name_th or self.walkin_name_en or '').strip()}"

    @property
    def phone(self) -> Optional[str]:
        # walk-in phone first, registered patients fall back to their record
        return self.walkin_phone or self.patient_phone

    @property
    def dentist_label(self) -> str:
        return self.dentist_name or UNASSIGNED_LABEL

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "booking_date": self.booking_date.isoformat(),
            "booking_time": format_time(self.booking_time),
            "status": self.status,
            "is_deleted": self.is_deleted,
            "dentist_id": self.dentist_id,
            "dentist_name": self.dentist_name,
            "dentist_code": self.dentist_code,
            "patient_id": self.patient_id,
            "hn": self.hn,
            "patient_name_th": self.patient_name_th,
            "patient_name_en": self.patient_name_en,
            "walkin_name_th": self.walkin_name_th,
            "walkin_name_en": self.walkin_name_en,
            "walkin_phone": self.walkin_phone,
            "patient_phone": self.patient_phone,
            "phone": self.phone,
            "patient_label": self.patient_label,
            "service_ids": list(self.service_ids),
            "service_names": list(self.service_names),
            "other_services": list(self.other_services),
            "note": self.note,
        }
