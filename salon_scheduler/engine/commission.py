"""Commission and checkout arithmetic.

The commission rate for a sale is the catalog item's own ``commission_rate``
when one is set (and positive), otherwise the professional's rate for the
item's category. Rates are read at calculation time, so reports follow the
current rate table rather than the one in force when the sale happened.
"""

from __future__ import annotations

from typing import Iterable, Optional

from salon_scheduler.schemas.appointment import Appointment
from salon_scheduler.schemas.catalog import CatalogItem, ItemType
from salon_scheduler.schemas.professional import Professional


def commission_rate(catalog_item: Optional[CatalogItem], professional: Optional[Professional]) -> float:
    if catalog_item is not None and catalog_item.commission_rate is not None and catalog_item.commission_rate > 0:
        return catalog_item.commission_rate
    if professional is None:
        return 0.0
    item_type = catalog_item.type if catalog_item is not None else ItemType.service
    return professional.commission_rates.rate_for(item_type)


def commission(
    appointment: Appointment,
    catalog_item: Optional[CatalogItem],
    professional: Optional[Professional],
) -> float:
    """Commission owed to ``professional`` for ``appointment``."""

    rate = commission_rate(catalog_item, professional)
    return appointment.charged_price * rate / 100


def final_price(
    total_price: float,
    extras: Iterable[float] = (),
    *,
    discount: float = 0.0,
    tip: float = 0.0,
) -> float:
    """Amount charged at checkout; the discount never drives the price below zero."""

    return max(0.0, total_price + sum(extras) - discount) + tip
