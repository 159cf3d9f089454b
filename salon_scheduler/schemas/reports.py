from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class CommissionReportRequest(BaseModel):
    year: Optional[int] = Field(None, ge=2000, le=2100)
    month: Optional[int] = Field(None, ge=1, le=12)


class CommissionBreakdown(BaseModel):
    service: float = 0.0
    product: float = 0.0
    subscription: float = 0.0


class ProfessionalCommission(BaseModel):
    professional_id: str
    name: str
    sales: float
    commission: float
    appointments_count: int
    breakdown: CommissionBreakdown


class CommissionReportResponse(BaseModel):
    year: int
    month: int
    total_commission: float
    items: List[ProfessionalCommission]
