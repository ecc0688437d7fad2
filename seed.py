"""
Idempotent seed-скрипт.
Запуск:
  python seed.py --reset         # дропнуть и пересоздать БД + демо-данные + admin
  python seed.py --ensure-admin  # создать только пользователя admin (без сидов)
  python seed.py                 # мягкое наполнение недостающих данных (idempotent)
"""
from __future__ import annotations
import argparse
from datetime import date, time, timedelta

from werkzeug.security import generate_password_hash

from app import create_app
from extensions import db
from models import Booking, BookingSettings, Dentist, Patient, Service, User

DENTISTS = [
    {"dentist_code": "D001", "name": "Dr. Anan Srisuk", "phone": "081-000-0001"},
    {"dentist_code": "D002", "name": "Dr. Busaba Chaiyo", "phone": "081-000-0002"},
    {"dentist_code": "D003", "name": "Dr. Chai Wongsa", "phone": None},
]
SERVICES = ["ขูดหินปูน", "อุดฟัน", "ถอนฟัน", "จัดฟัน", "ตรวจสุขภาพฟัน"]
PATIENTS = [
    {"hn": "HN0001", "name_th": "สมชาย ใจดี", "name_en": "Somchai Jaidee", "phone": "089-111-1111"},
    {"hn": "HN0002", "name_th": "สมหญิง รักสุข", "name_en": "Somying Raksuk", "phone": "089-222-2222"},
]


def get_or_create(model, defaults=None, **filters):
    inst = db.session.query(model).filter_by(**filters).first()
    if inst:
        return inst, False
    data = dict(filters)
    if defaults:
        data.update(defaults)
    inst = model(**data)
    db.session.add(inst)
    return inst, True


def ensure_admin(email: str = "admin@example.com", password: str = "admin") -> User:
    user, created = get_or_create(
        User, email=email,
        defaults={"password_hash": generate_password_hash(password), "role": "ADMIN", "is_active": True},
    )
    db.session.commit()
    if created:
        print(f"admin created: {email}")
    return user


def seed_directory() -> None:
    for d in DENTISTS:
        get_or_create(Dentist, dentist_code=d["dentist_code"], defaults={"name": d["name"], "phone": d["phone"]})
    for name in SERVICES:
        get_or_create(Service, name_th=name)
    for p in PATIENTS:
        get_or_create(Patient, hn=p["hn"], defaults={k: v for k, v in p.items() if k != "hn"})
    get_or_create(BookingSettings, id=1, defaults={"slot_capacity_per_dentist": 2, "slot_capacity_unassigned": 1})
    db.session.commit()


def seed_demo_bookings() -> None:
    if Booking.query.first():
        return
    today = date.today()
    d1 = Dentist.query.filter_by(dentist_code="D001").first()
    p1 = Patient.query.filter_by(hn="HN0001").first()
    cleaning = Service.query.filter_by(name_th="ขูดหินปูน").first()
    b1 = Booking(booking_date=today, booking_time=time(10, 0), dentist_id=d1.id, patient_id=p1.id)
    b1.services = [cleaning]
    b2 = Booking(booking_date=today + timedelta(days=1), booking_time=time(13, 30),
                 walkin_name_en="Walk-in Guest", walkin_phone="080-999-9999",
                 other_services=["Consultation"])
    db.session.add_all([b1, b2])
    db.session.commit()


def main():
    parser = argparse.ArgumentParser(description="Seed the clinic booking database")
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables first")
    parser.add_argument("--ensure-admin", action="store_true", help="only make sure the admin user exists")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        if args.reset:
            db.drop_all()
        db.create_all()
        ensure_admin()
        if args.ensure_admin:
            return
        seed_directory()
        seed_demo_bookings()
        print("DB seeded ✅")


if __name__ == "__main__":
    main()
