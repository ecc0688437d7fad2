from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

# ---------- Dentists ----------
class DentistOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    dentist_code: Optional[str] = None
    name: str
    phone: Optional[str] = None
    is_active: bool

# ---------- Services ----------
class ServiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    is_active: bool

# ---------- Patients ----------
class PatientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    hn: str
    name_th: Optional[str] = None
    name_en: Optional[str] = None
    phone: Optional[str] = None

# ---------- Booking settings ----------
class SettingsIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    slot_capacity_per_dentist: int = Field(ge=0, le=100)
    slot_capacity_unassigned: int = Field(ge=0, le=100)

class SettingsOut(SettingsIn):
    updated_at: Optional[datetime] = None
