from __future__ import annotations
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from scheduling.entities import BookingDraft, patient_ref_from_fields


class _BookingFields(BaseModel):
    # дата/время опциональны на уровне схемы: понятное сообщение даёт BookingDraft.validate
    dentist_id: Optional[int] = None
    booking_date: Optional[date] = None
    booking_time: Optional[str] = Field(None, max_length=8)
    service_ids: List[int] = Field(default_factory=list)
    other_services: Optional[List[str]] = None
    note: Optional[str] = Field(None, max_length=2000)

    @field_validator("other_services")
    @classmethod
    def _limit_other(cls, v):
        if v and any(len(x or "") > 200 for x in v):
            raise ValueError("too_long")
        return v


class BookingCreateIn(_BookingFields):
    patient_id: Optional[int] = None
    walkin_name_th: Optional[str] = Field(None, max_length=255)
    walkin_name_en: Optional[str] = Field(None, max_length=255)
    walkin_phone: Optional[str] = Field(None, max_length=40)

    def to_draft(self) -> BookingDraft:
        return BookingDraft(
            booking_date=self.booking_date,
            booking_time=self.booking_time,
            patient=patient_ref_from_fields(
                self.patient_id, self.walkin_name_th, self.walkin_name_en, self.walkin_phone
            ),
            dentist_id=self.dentist_id,
            service_ids=self.service_ids,
            other_services=self.other_services or [],
            note=self.note,
        )


class BookingUpdateIn(_BookingFields):
    # пациент после создания не меняется
    model_config = ConfigDict(extra="forbid")

    def to_draft(self) -> BookingDraft:
        return BookingDraft(
            booking_date=self.booking_date,
            booking_time=self.booking_time,
            dentist_id=self.dentist_id,
            service_ids=self.service_ids,
            other_services=self.other_services or [],
            note=self.note,
        )
