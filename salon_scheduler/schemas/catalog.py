from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class ItemType(str, Enum):
    service = "service"
    product = "product"
    subscription = "subscription"


class CatalogItem(BaseModel):
    """A sellable service, product or subscription package."""

    id: str
    name: str
    type: ItemType = ItemType.service
    price: float = Field(..., ge=0)
    duration_minutes: int = Field(0, ge=0)  # 0 for products
    commission_rate: Optional[float] = Field(None, ge=0, le=100)
    description: Optional[str] = None

    @model_validator(mode="after")
    def _services_take_time(self) -> "CatalogItem":
        if self.type is ItemType.service and self.duration_minutes <= 0:
            raise ValueError("services must last at least one minute")
        return self


class CatalogListResponse(BaseModel):
    total: int
    items: List[CatalogItem]
