from __future__ import annotations

from datetime import date as Date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from salon_scheduler.engine.time_utils import normalize_time
from salon_scheduler.schemas.appointment import Appointment

ANY_PROFESSIONAL = "any"


class WaitlistEntry(BaseModel):
    id: str
    client_name: str
    client_phone: str = ""
    service_id: str
    professional_id: str = ANY_PROFESSIONAL
    date: Date
    created_at: datetime


class WaitlistJoinRequest(BaseModel):
    client_name: str = Field(..., min_length=1)
    client_phone: str = Field(..., min_length=1)
    service_id: str
    professional_id: str = ANY_PROFESSIONAL
    date: Date


class WaitlistListRequest(BaseModel):
    date: Optional[Date] = None


class WaitlistListResponse(BaseModel):
    total: int
    items: List[WaitlistEntry]


class WaitlistWithdrawRequest(BaseModel):
    entry_id: str


class WaitlistWithdrawResponse(BaseModel):
    entry_id: str
    removed: bool


class WaitlistPromoteRequest(BaseModel):
    entry_id: str
    time: str = Field(..., description="Start time HH:MM, e.g. '09:00'")
    professional_id: Optional[str] = Field(
        None, description="Overrides the entry's professional; 'any' books the first free one"
    )
    notes: Optional[str] = None

    @field_validator("time")
    @classmethod
    def _normalize_time(cls, value: str) -> str:
        return normalize_time(value)


class WaitlistPromoteResponse(BaseModel):
    entry_id: str
    appointment: Appointment
