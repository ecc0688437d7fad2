from datetime import datetime, time, date
from enum import Enum as PyEnum

from flask_login import UserMixin
from sqlalchemy import (
    CheckConstraint, ForeignKey, Index, Boolean, Date, DateTime, Time,
    Integer, Text, JSON, event
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from extensions import db

# ---------- Enums ----------
class StaffRole(PyEnum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"


# ---------- Association Tables ----------
booking_services = db.Table(
    "booking_services",
    db.Column("booking_id", db.Integer, db.ForeignKey("booking.id", ondelete="CASCADE"), primary_key=True),
    db.Column("service_id", db.Integer, db.ForeignKey("service.id", ondelete="RESTRICT"), primary_key=True),
)


# ---------- Staff ----------
class User(UserMixin, db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False)
    role: Mapped[str] = mapped_column(db.String(20), nullable=False, default=StaffRole.STAFF.value)
    is_active: Mapped[bool] = mapped_column(db.Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.email}>"


# ---------- Directory ----------
class Dentist(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    dentist_code: Mapped[str | None] = mapped_column(db.String(50), unique=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(db.String(40))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    def __repr__(self):
        return f"<Dentist {self.name}>"


class Service(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    name_th: Mapped[str] = mapped_column(db.String(255), nullable=False, unique=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    def __repr__(self):
        return f"<Service {self.name_th}>"


class Patient(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    hn: Mapped[str] = mapped_column(db.String(50), unique=True, nullable=False, index=True)
    name_th: Mapped[str | None] = mapped_column(db.String(255))
    name_en: Mapped[str | None] = mapped_column(db.String(255))
    phone: Mapped[str | None] = mapped_column(db.String(40))
    # lower-cased hn + names + phone, kept in sync on write
    search_text: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def build_search_text(self) -> str:
        parts = [self.hn, self.name_th, self.name_en, self.phone]
        return " ".join(p.strip() for p in parts if p and p.strip()).lower()

    def __repr__(self):
        return f"<Patient {self.hn}>"


@event.listens_for(Patient, "before_insert")
@event.listens_for(Patient, "before_update")
def _patient_search_text(mapper, connection, target: Patient):
    target.search_text = target.build_search_text()


class BookingSettings(db.Model):
    __tablename__ = "booking_settings"

    id: Mapped[int] = mapped_column(primary_key=True, default=1)
    slot_capacity_per_dentist: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    slot_capacity_unassigned: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("id = 1", name="ck_booking_settings_singleton"),
        CheckConstraint("slot_capacity_per_dentist >= 0 AND slot_capacity_unassigned >= 0",
                        name="ck_booking_settings_non_negative"),
    )


# ---------- Bookings ----------
class Booking(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    booking_time: Mapped[time] = mapped_column(Time, nullable=False)
    dentist_id: Mapped[int | None] = mapped_column(ForeignKey("dentist.id", ondelete="RESTRICT"), nullable=True, index=True)
    patient_id: Mapped[int | None] = mapped_column(ForeignKey("patient.id", ondelete="RESTRICT"), nullable=True, index=True)
    walkin_name_th: Mapped[str | None] = mapped_column(db.String(255))
    walkin_name_en: Mapped[str | None] = mapped_column(db.String(255))
    walkin_phone: Mapped[str | None] = mapped_column(db.String(40))
    other_services: Mapped[list | None] = mapped_column(JSON)
    note: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(db.String(20), nullable=False, default="booked")
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by_id: Mapped[int | None] = mapped_column(ForeignKey("user.id", ondelete="SET NULL"))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime)

    dentist = relationship("Dentist")
    patient = relationship("Patient")
    services = relationship("Service", secondary=booking_services, order_by="Service.id")

    __table_args__ = (
        Index("ix_booking_cell", "booking_date", "booking_time"),
        CheckConstraint("status IN ('booked', 'cancelled')", name="ck_booking_status"),
        CheckConstraint(
            "patient_id IS NOT NULL OR walkin_name_th IS NOT NULL OR walkin_name_en IS NOT NULL",
            name="ck_booking_patient_identity",
        ),
    )

    def __repr__(self):
        return f"<Booking {self.id} {self.booking_date} {self.booking_time}>"
