from __future__ import annotations

from datetime import date as Date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from salon_scheduler.engine.time_utils import normalize_time


class SlotListRequest(BaseModel):
    service_id: str
    professional_id: str = Field("any", description="Professional id, or 'any' to merge every active professional")
    date: Date


class SlotListResponse(BaseModel):
    professional_id: str
    date: Date
    service_id: str
    duration_minutes: int
    slots: List[str]
    # Empty slot list on a bookable date: offer the waitlist instead.
    waitlist_suggested: bool = False


class AvailabilityCheckRequest(BaseModel):
    professional_id: str
    date: Date
    time: str
    service_id: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, gt=0)

    @field_validator("time")
    @classmethod
    def _normalize_time(cls, value: str) -> str:
        return normalize_time(value)


class AvailabilityCheckResponse(BaseModel):
    available: bool
    duration_minutes: int
    blocked_by: Optional[str] = None
    reason: Optional[str] = None
