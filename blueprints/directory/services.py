# blueprints/directory/services.py
from __future__ import annotations
import logging
from typing import List

from flask import current_app
from sqlalchemy import case, func, or_

from blueprints.api.store import store_call
from extensions import db
from models import BookingSettings as SettingsRow, Dentist as DentistRow, Patient, Service as ServiceRow
from scheduling.entities import BookingSettings, Dentist, PatientLite, Service

log = logging.getLogger(__name__)

SETTINGS_ID = 1
LIKE_ESCAPE = "\\"


def _escape_like(q: str) -> str:
    return q.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _like(q: str) -> str:
    return f"%{_escape_like(q)}%"


def _dentist(row: DentistRow) -> Dentist:
    return Dentist(id=row.id, name=row.name, is_active=row.is_active,
                   dentist_code=row.dentist_code, phone=row.phone)


def list_dentists(active_only: bool = True) -> List[Dentist]:
    with store_call("load dentists"):
        q = DentistRow.query
        if active_only:
            q = q.filter(DentistRow.is_active.is_(True))
        return [_dentist(r) for r in q.order_by(DentistRow.name.asc(), DentistRow.id.asc()).all()]


def active_dentist_count() -> int:
    with store_call("count dentists"):
        return db.session.query(func.count(DentistRow.id)).filter(DentistRow.is_active.is_(True)).scalar() or 0


def list_services(active_only: bool = True) -> List[Service]:
    with store_call("load services"):
        q = ServiceRow.query
        if active_only:
            q = q.filter(ServiceRow.is_active.is_(True))
        rows = q.order_by(ServiceRow.name_th.asc()).all()
        return [Service(id=r.id, name=r.name_th, is_active=r.is_active) for r in rows]


def _settings_row() -> SettingsRow:
    row = db.session.get(SettingsRow, SETTINGS_ID)
    if row is None:
        cfg = current_app.config
        row = SettingsRow(
            id=SETTINGS_ID,
            slot_capacity_per_dentist=int(cfg.get("DEFAULT_SLOT_CAPACITY_PER_DENTIST", 1)),
            slot_capacity_unassigned=int(cfg.get("DEFAULT_SLOT_CAPACITY_UNASSIGNED", 1)),
        )
        db.session.add(row)
        db.session.commit()
        log.info("booking settings initialised", extra={"event": "settings_created"})
    return row


def get_settings() -> BookingSettings:
    with store_call("load booking settings"):
        row = _settings_row()
        return BookingSettings(row.slot_capacity_per_dentist, row.slot_capacity_unassigned)


def get_settings_row() -> SettingsRow:
    with store_call("load booking settings"):
        return _settings_row()


def update_settings(per_dentist: int, unassigned: int) -> SettingsRow:
    # через value object, чтобы правила были в одном месте
    BookingSettings(per_dentist, unassigned)
    with store_call("update booking settings"):
        row = _settings_row()
        row.slot_capacity_per_dentist = per_dentist
        row.slot_capacity_unassigned = unassigned
        db.session.commit()
    log.info("booking settings updated", extra={"event": "settings_updated"})
    return row


def search_patients(query: str, limit: int = 20, offset: int = 0) -> List[PatientLite]:
    qn = (query or "").strip().lower()
    if not qn:
        return []
    with store_call("search patients"):
        rows = (
            Patient.query
            .filter(or_(
                Patient.search_text.like(_like(qn), escape=LIKE_ESCAPE),
                Patient.hn.ilike(_like(qn), escape=LIKE_ESCAPE),
            ))
            .order_by(
                case((Patient.hn.ilike(f"{_escape_like(qn)}%", escape=LIKE_ESCAPE), 0), else_=1),
                Patient.hn.asc(),
            )
            .offset(max(offset, 0))
            .limit(limit)
            .all()
        )
        return [PatientLite(id=p.id, hn=p.hn, name_th=p.name_th, name_en=p.name_en, phone=p.phone) for p in rows]
