from __future__ import annotations

from datetime import date as Date, datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from salon_scheduler.engine.time_utils import normalize_time


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"
    blocked = "blocked"


class PaymentMethod(str, Enum):
    money = "money"
    pix = "pix"
    card = "card"
    other = "other"


class ClientInfo(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = ""


class Appointment(BaseModel):
    id: str
    service_id: str
    professional_id: str
    date: Date
    time: str  # HH:MM local
    client: ClientInfo
    client_account_id: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.pending
    total_price: float
    final_price: Optional[float] = None
    discount: Optional[float] = None
    tip: Optional[float] = None
    payment_method: Optional[PaymentMethod] = None
    commission: Optional[float] = None
    notes: Optional[str] = None
    created_at: datetime

    @field_validator("time")
    @classmethod
    def _normalize_time(cls, value: str) -> str:
        return normalize_time(value)

    @property
    def charged_price(self) -> float:
        return self.final_price if self.final_price is not None else self.total_price


class AppointmentBookRequest(BaseModel):
    service_id: str
    professional_id: str = Field("any", description="Professional id, or 'any' for the first free one")
    date: Date
    time: str = Field(..., description="Start time HH:MM, e.g. '09:30'")
    client: ClientInfo
    client_account_id: Optional[str] = None
    status: Literal["pending", "confirmed"] = "pending"
    notes: Optional[str] = None

    @field_validator("time")
    @classmethod
    def _normalize_time(cls, value: str) -> str:
        return normalize_time(value)


class AppointmentListRequest(BaseModel):
    professional_id: Optional[str] = None
    date: Optional[Date] = None
    status: Optional[AppointmentStatus] = None
    page: int = Field(1, ge=1)
    page_size: int = Field(50, ge=1, le=500)


class AppointmentListResponse(BaseModel):
    total: int
    page: int
    page_size: int
    items: List[Appointment]


class AppointmentCancelRequest(BaseModel):
    appointment_id: str


class AppointmentCancelResponse(BaseModel):
    appointment: Appointment
    promoted_appointment: Optional[Appointment] = None
    promoted_entry_id: Optional[str] = None


class AppointmentCompleteRequest(BaseModel):
    appointment_id: str
    payment_method: PaymentMethod = PaymentMethod.money
    discount: float = Field(0.0, ge=0)
    tip: float = Field(0.0, ge=0)
    extra_item_ids: List[str] = Field(default_factory=list)
