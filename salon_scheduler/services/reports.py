from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from salon_scheduler.context import ADMIN_CONTEXT, RequestContext
from salon_scheduler.engine.commission import commission
from salon_scheduler.engine.time_utils import local_today
from salon_scheduler.schemas.appointment import AppointmentStatus
from salon_scheduler.schemas.catalog import ItemType
from salon_scheduler.schemas.reports import (
    CommissionBreakdown,
    CommissionReportRequest,
    CommissionReportResponse,
    ProfessionalCommission,
)
from salon_scheduler.services.store import SchedulingStore, get_store

logger = logging.getLogger(__name__)


class CommissionReportService:
    """Monthly commission totals per active professional.

    Figures are recomputed from the current rate table on every call, so a
    rate change also moves the numbers of past months.
    """

    def __init__(self, store: SchedulingStore | None = None) -> None:
        self._store = store or get_store()

    async def monthly(
        self,
        request: CommissionReportRequest,
        context: RequestContext = ADMIN_CONTEXT,
        *,
        today: Optional[date] = None,
    ) -> CommissionReportResponse:
        today = today or local_today()
        year = request.year or today.year
        month = request.month or today.month
        logger.info("Building commission report for %04d-%02d", year, month)

        master_data = self._store.master_data
        completed = await self._store.appointments.list(status=AppointmentStatus.completed)

        items = []
        for professional in master_data.iter_professionals(active_only=True):
            if not context.can_see(professional.id):
                continue

            breakdown = CommissionBreakdown()
            sales = 0.0
            count = 0
            for appointment in completed:
                if appointment.professional_id != professional.id:
                    continue
                if appointment.date.year != year or appointment.date.month != month:
                    continue
                item = master_data.get_item(appointment.service_id)
                item_type = item.type if item is not None else ItemType.service
                amount = commission(appointment, item, professional)
                setattr(breakdown, item_type.value, getattr(breakdown, item_type.value) + amount)
                sales += appointment.charged_price
                count += 1

            items.append(
                ProfessionalCommission(
                    professional_id=professional.id,
                    name=professional.name,
                    sales=round(sales, 2),
                    commission=round(breakdown.service + breakdown.product + breakdown.subscription, 2),
                    appointments_count=count,
                    breakdown=breakdown,
                )
            )

        return CommissionReportResponse(
            year=year,
            month=month,
            total_commission=round(sum(item.commission for item in items), 2),
            items=items,
        )
