from __future__ import annotations
from datetime import date, time
import pytest

from scheduling.entities import (
    BookingDraft, BookingSettings, BookingView, OtherServices, Registered, WalkIn,
    patient_ref_from_fields,
)
from scheduling.errors import ValidationError
from scheduling.grid import SlotGrid

GRID = SlotGrid()


def test_other_services_dedup_case_insensitive():
    other = OtherServices(["Whitening", " whitening ", "", None, "X-ray", "WHITENING"])
    assert other == ["Whitening", "X-ray"]
    assert "x-RAY" in other
    assert other.add("x-ray") is False
    assert other.add("Veneer") is True
    other.discard("WHITENING")
    assert other.to_list() == ["X-ray", "Veneer"]


def test_patient_ref_cases():
    assert patient_ref_from_fields(patient_id=7) == Registered(7)
    walkin = patient_ref_from_fields(walkin_name_en="  John  ", walkin_phone=" 081 ")
    assert walkin == WalkIn(name_en="John", phone="081")


def test_patient_ref_errors():
    with pytest.raises(ValidationError) as ei:
        patient_ref_from_fields(patient_id=1, walkin_name_th="สมชาย")
    assert ei.value.code == "patient_ambiguous"

    with pytest.raises(ValidationError) as ei:
        patient_ref_from_fields()
    assert ei.value.code == "patient_required"

    # phone alone is not an identity
    with pytest.raises(ValidationError) as ei:
        patient_ref_from_fields(walkin_phone="0811111111")
    assert ei.value.code == "patient_required"


def _draft(**kw):
    base = dict(
        booking_date=date(2025, 9, 5),
        booking_time="10:15",
        patient=Registered(1),
        service_ids=[2, 2, 1],
    )
    base.update(kw)
    return BookingDraft(**base)


def test_draft_normalises_fields():
    d = _draft(other_services=["Check", "check"], note="   ").validate(GRID)
    assert d.service_ids == [2, 1]
    assert d.other_services == ["Check"]
    assert d.note is None
    assert d.booking_time == time(10, 15)


def test_draft_requires_a_service():
    with pytest.raises(ValidationError) as ei:
        _draft(service_ids=[], other_services=["  "]).validate(GRID)
    assert ei.value.code == "services_required"
    # free-text alone is enough
    _draft(service_ids=[], other_services=["Consultation"]).validate(GRID)


@pytest.mark.parametrize("kw,code", [
    ({"booking_date": None}, "date_required"),
    ({"booking_time": None}, "time_required"),
    ({"booking_time": "10:05"}, "invalid_time"),
    ({"patient": None}, "patient_required"),
])
def test_draft_validation_codes(kw, code):
    with pytest.raises(ValidationError) as ei:
        _draft(**kw).validate(GRID)
    assert ei.value.code == code


def test_draft_without_patient_for_updates():
    _draft(patient=None).validate(GRID, require_patient=False)


def test_settings_non_negative():
    BookingSettings(0, 0)
    with pytest.raises(ValidationError):
        BookingSettings(-1, 1)


def test_booking_view_labels():
    registered = BookingView(id=1, booking_date=date(2025, 9, 5), booking_time=time(10, 0),
                             hn="HN0001", patient_name_th="สมชาย ใจดี", dentist_name="Dr. A")
    walkin = BookingView(id=2, booking_date=date(2025, 9, 5), booking_time=time(10, 0),
                         walkin_name_en="Guest")
    assert registered.patient_label == "HN0001 สมชาย ใจดี"
    assert walkin.patient_label == "No HN - Guest"
    assert registered.dentist_label == "Dr. A"
    assert walkin.dentist_label == "Unassigned"
    assert walkin.phone is None
    registered.patient_phone = "089-111"
    assert registered.phone == "089-111"
    walkin.walkin_phone = "080"
    assert walkin.phone == "080"
    out = walkin.to_dict()
    assert out["booking_time"] == "10:00"
    assert out["booking_date"] == "2025-09-05"
    assert out["patient_label"] == "No HN - Guest"
