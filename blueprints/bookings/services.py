# blueprints/bookings/services.py
from __future__ import annotations
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional

from flask import current_app
from sqlalchemy.orm import selectinload

from blueprints.api.store import store_call
from blueprints.directory.services import get_settings
from extensions import db
from models import Booking, Dentist, Patient, Service
from scheduling import lifecycle
from scheduling.capacity import pool_usage
from scheduling.entities import BookingDraft, BookingView, Registered, WalkIn
from scheduling.errors import CapacityExceededError, NotFoundError, ValidationError
from scheduling.grid import SlotGrid
from scheduling.query import ManageFilters, Page, list_bookings

log = logging.getLogger(__name__)


def current_grid() -> SlotGrid:
    return SlotGrid.from_config(current_app.config)


# ---------- read projection ----------
def to_view(b: Booking) -> BookingView:
    p: Optional[Patient] = b.patient
    d: Optional[Dentist] = b.dentist
    return BookingView(
        id=b.id,
        booking_date=b.booking_date,
        booking_time=b.booking_time,
        status=b.status,
        is_deleted=bool(b.is_deleted),
        dentist_id=b.dentist_id,
        patient_id=b.patient_id,
        hn=(p.hn if p else None),
        patient_name_th=(p.name_th if p else None),
        patient_name_en=(p.name_en if p else None),
        patient_search_text=(p.search_text if p else None),
        patient_phone=(p.phone if p else None),
        walkin_name_th=b.walkin_name_th,
        walkin_name_en=b.walkin_name_en,
        walkin_phone=b.walkin_phone,
        dentist_name=(d.name if d else None),
        dentist_code=(d.dentist_code if d else None),
        service_ids=[s.id for s in b.services],
        service_names=[s.name_th for s in b.services],
        other_services=list(b.other_services or []),
        note=b.note,
    )


def _base_query():
    return Booking.query.options(
        selectinload(Booking.dentist),
        selectinload(Booking.patient),
        selectinload(Booking.services),
    )


def list_bookings_in_range(date_from: date, date_to: date, include_deleted: bool = False) -> List[BookingView]:
    if date_to < date_from:
        date_from, date_to = date_to, date_from
    with store_call("load bookings"):
        q = _base_query().filter(Booking.booking_date >= date_from, Booking.booking_date <= date_to)
        if not include_deleted:
            q = q.filter(Booking.is_deleted.is_(False))
        rows = q.order_by(Booking.booking_date.asc(), Booking.booking_time.asc(), Booking.id.asc()).all()
        return [to_view(b) for b in rows]


def list_bookings_filtered(filters: ManageFilters, page: int, page_size: int) -> Page:
    rows = list_bookings_in_range(filters.date_from, filters.date_to, include_deleted=filters.include_deleted)
    return list_bookings(rows, filters, page=page, page_size=page_size)


def _load(booking_id: int) -> Booking:
    b = db.session.get(Booking, booking_id)
    if b is None:
        raise NotFoundError(f"Booking {booking_id} was not found", code="booking_not_found", booking_id=booking_id)
    return b


def get_booking(booking_id: int) -> BookingView:
    with store_call("load booking"):
        return to_view(_load(booking_id))


# ---------- write path checks ----------
def _resolve_dentist(dentist_id: Optional[int], keep_id: Optional[int] = None) -> Optional[Dentist]:
    if dentist_id is None:
        return None
    d = db.session.get(Dentist, dentist_id)
    if d is None:
        raise ValidationError(f"Dentist {dentist_id} does not exist", code="dentist_not_found")
    # неактивного врача нельзя назначить, но уже назначенный остаётся
    if not d.is_active and d.id != keep_id:
        raise ValidationError(f"Dentist {d.name} is not active", code="dentist_inactive")
    return d


def _resolve_services(service_ids: Iterable[int], keep_ids: Iterable[int] = ()) -> List[Service]:
    ids = list(service_ids)
    if not ids:
        return []
    found = {s.id: s for s in Service.query.filter(Service.id.in_(ids)).all()}
    missing = [i for i in ids if i not in found]
    if missing:
        raise ValidationError(f"Unknown service id(s): {', '.join(map(str, missing))}", code="service_not_found")
    keep = set(keep_ids)
    inactive = [found[i].name_th for i in ids if not found[i].is_active and i not in keep]
    if inactive:
        raise ValidationError(f"Service(s) not active: {', '.join(inactive)}", code="service_inactive")
    return [found[i] for i in ids]


def _check_capacity(draft: BookingDraft, exclude_id: Optional[int] = None) -> None:
    if not current_app.config.get("ENFORCE_SLOT_CAPACITY"):
        return
    settings = get_settings()
    in_cell = Booking.query.filter_by(booking_date=draft.booking_date, booking_time=draft.booking_time).all()
    booked, cap = pool_usage(draft.booking_date, draft.booking_time, in_cell, draft.dentist_id,
                             settings, exclude_id=exclude_id)
    if booked >= cap:
        pool = "this dentist" if draft.dentist_id is not None else "unassigned bookings"
        raise CapacityExceededError(
            f"{draft.booking_date.isoformat()} {draft.booking_time.strftime('%H:%M')} is full for {pool} "
            f"({booked}/{cap})",
            booked=booked, capacity=cap,
        )


# ---------- commands ----------
def create_booking(draft: BookingDraft, *, created_by: Optional[int] = None) -> int:
    draft.validate(current_grid())
    with store_call("create booking"):
        ref = draft.patient
        if isinstance(ref, Registered) and db.session.get(Patient, ref.patient_id) is None:
            raise ValidationError(f"Patient {ref.patient_id} does not exist", code="patient_not_found")
        _resolve_dentist(draft.dentist_id)
        services = _resolve_services(draft.service_ids)
        _check_capacity(draft)

        b = Booking(
            booking_date=draft.booking_date,
            booking_time=draft.booking_time,
            dentist_id=draft.dentist_id,
            patient_id=(ref.patient_id if isinstance(ref, Registered) else None),
            walkin_name_th=(ref.name_th if isinstance(ref, WalkIn) else None),
            walkin_name_en=(ref.name_en if isinstance(ref, WalkIn) else None),
            walkin_phone=(ref.phone if isinstance(ref, WalkIn) else None),
            other_services=(draft.other_services.to_list() or None),
            note=draft.note,
            status="booked",
            is_deleted=False,
            created_by_id=created_by,
        )
        b.services = services
        db.session.add(b)
        db.session.commit()
    log.info("booking created", extra={"event": "booking_created", "booking_id": b.id})
    return b.id


def update_booking(booking_id: int, draft: BookingDraft) -> int:
    """Replace date, time, dentist, services and note. Patient binding never changes."""
    grid = current_grid()
    with store_call("update booking"):
        b = _load(booking_id)
        lifecycle.ensure_can_update(b)
        draft.validate(grid, require_patient=False)
        _resolve_dentist(draft.dentist_id, keep_id=b.dentist_id)
        services = _resolve_services(draft.service_ids, keep_ids=[s.id for s in b.services])
        if b.status == "booked":
            _check_capacity(draft, exclude_id=b.id)

        b.booking_date = draft.booking_date
        b.booking_time = draft.booking_time
        b.dentist_id = draft.dentist_id
        b.services = services
        b.other_services = draft.other_services.to_list() or None
        b.note = draft.note
        db.session.commit()
    log.info("booking updated", extra={"event": "booking_updated", "booking_id": booking_id})
    return booking_id


def cancel_booking(booking_id: int) -> None:
    with store_call("cancel booking"):
        b = _load(booking_id)
        b.status, b.is_deleted = lifecycle.apply_cancel(b)
        b.cancelled_at = datetime.utcnow()
        db.session.commit()
    log.info("booking cancelled", extra={"event": "booking_cancelled", "booking_id": booking_id})


def soft_delete_booking(booking_id: int) -> None:
    with store_call("delete booking"):
        b = _load(booking_id)
        b.status, b.is_deleted = lifecycle.apply_soft_delete(b)
        b.deleted_at = datetime.utcnow()
        db.session.commit()
    log.info("booking deleted", extra={"event": "booking_deleted", "booking_id": booking_id})
