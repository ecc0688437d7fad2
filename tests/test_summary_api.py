from __future__ import annotations
import csv
from datetime import date, time
from io import StringIO
import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from blueprints.auth.routes import reset_rate_limits
from extensions import db
from models import Booking, Dentist, Patient, Service, User

D1 = date(2025, 9, 5)
D2 = date(2025, 9, 6)
RANGE = "date_from=2025-09-05&date_to=2025-09-06"

@pytest.fixture()
def client():
    app = create_app("test")
    reset_rate_limits()
    with app.app_context():
        db.create_all()
        anan = Dentist(id=1, name="Dr. Anan")
        busaba = Dentist(id=2, name="Dr. Busaba")
        scaling = Service(id=1, name_th="ขูดหินปูน")
        p = Patient(id=1, hn="HN0001", name_th="สมชาย ใจดี", phone="089-111-1111")
        db.session.add_all([
            User(email="front@example.com", password_hash=generate_password_hash("pass"), role="STAFF"),
            anan, busaba, scaling, p,
        ])
        db.session.flush()
        b1 = Booking(booking_date=D1, booking_time=time(10, 0), dentist_id=1, patient_id=1, note="x-ray")
        b1.services = [scaling]
        db.session.add_all([
            b1,
            Booking(booking_date=D1, booking_time=time(10, 30), dentist_id=1, walkin_name_en="Alice"),
            Booking(booking_date=D1, booking_time=time(10, 15), dentist_id=2,
                    walkin_name_en="Bob", other_services=["Consult"]),
            Booking(booking_date=D1, booking_time=time(11, 0), walkin_name_en="Walk", walkin_phone="080"),
            Booking(booking_date=D2, booking_time=time(10, 0), dentist_id=2, walkin_name_en="Next"),
            Booking(booking_date=D1, booking_time=time(12, 0), walkin_name_en="Gone", status="cancelled"),
            Booking(booking_date=D1, booking_time=time(12, 0), dentist_id=1, walkin_name_en="Deleted",
                    is_deleted=True),
            Booking(booking_date=date(2025, 9, 7), booking_time=time(10, 0), walkin_name_en="Outside"),
        ])
        db.session.commit()
        with app.test_client() as c:
            r = c.post("/api/v1/auth/login", json={"email": "front@example.com", "password": "pass"})
            assert r.status_code == 200
            yield c
        db.session.remove()
        db.drop_all()

def test_summary_by_date_excludes_cancelled_and_deleted(client):
    r = client.get(f"/api/v1/summary?{RANGE}")
    assert r.status_code == 200
    js = r.get_json()
    assert js["group_by"] == "date"
    assert js["total"] == 5
    assert [(g["key"], g["count"]) for g in js["groups"]] == [("2025-09-05", 4), ("2025-09-06", 1)]
    assert [b["booking_time"] for b in js["groups"][0]["rows"]] == ["10:00", "10:15", "10:30", "11:00"]

    js = client.get(f"/api/v1/summary?{RANGE}&include_cancelled=true").get_json()
    assert js["total"] == 6

def test_summary_by_dentist(client):
    js = client.get(f"/api/v1/summary?{RANGE}&group_by=dentist").get_json()
    assert [(g["key"], g["count"]) for g in js["groups"]] == [
        ("Dr. Anan", 2), ("Dr. Busaba", 2), ("Unassigned", 1),
    ]

def test_summary_dentist_and_unassigned_filters(client):
    js = client.get(f"/api/v1/summary?{RANGE}&include_unassigned=false").get_json()
    assert js["total"] == 4

    js = client.get(f"/api/v1/summary?{RANGE}&dentist_id=1").get_json()
    assert js["total"] == 3  # Dr. Anan + unassigned

    js = client.get(f"/api/v1/summary?{RANGE}&dentist_id=1&include_unassigned=false").get_json()
    assert js["total"] == 2

def test_summary_csv(client):
    r = client.get(f"/api/v1/summary.csv?{RANGE}&group_by=dentist")
    assert r.status_code == 200
    assert r.mimetype == "text/csv"
    assert "summary_2025-09-05_2025-09-06.csv" in r.headers["Content-Disposition"]

    rows = list(csv.reader(StringIO(r.get_data(as_text=True)), delimiter=";"))
    assert rows[0] == ["group", "date", "time", "patient", "phone", "dentist", "services", "status", "note"]
    assert len(rows) == 6
    assert rows[1] == ["Dr. Anan", "2025-09-05", "10:00", "HN0001 สมชาย ใจดี", "089-111-1111", "Dr. Anan",
                       "ขูดหินปูน", "booked", "x-ray"]
    assert rows[-1][:6] == ["Unassigned", "2025-09-05", "11:00", "No HN - Walk", "080", "Unassigned"]
    bob = next(row for row in rows if row[3] == "No HN - Bob")
    assert bob[6] == "Consult"

def test_summary_bad_group_by(client):
    r = client.get(f"/api/v1/summary?{RANGE}&group_by=room")
    assert r.status_code == 422
    assert r.get_json()["error"] == "invalid_group_by"
