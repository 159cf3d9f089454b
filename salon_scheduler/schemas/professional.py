from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from salon_scheduler.schemas.catalog import ItemType


class CommissionRates(BaseModel):
    service: float = Field(0.0, ge=0, le=100)
    product: float = Field(0.0, ge=0, le=100)
    subscription: float = Field(0.0, ge=0, le=100)

    def rate_for(self, item_type: ItemType) -> float:
        rates = {
            ItemType.service: self.service,
            ItemType.product: self.product,
            ItemType.subscription: self.subscription,
        }
        return rates[item_type]


class Professional(BaseModel):
    id: str
    name: str
    phone: Optional[str] = None
    description: Optional[str] = None
    commission_rates: CommissionRates = Field(default_factory=CommissionRates)
    active: bool = True


class ProfessionalListResponse(BaseModel):
    total: int
    items: List[Professional]
