from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException

from salon_scheduler.config import Settings, get_settings
from salon_scheduler.context import RequestContext, Role
from salon_scheduler.services import (
    BlockRuleService,
    BookingService,
    CommissionReportService,
    WaitlistService,
)
from salon_scheduler.services.store import SchedulingStore, get_store


def get_scheduling_store() -> SchedulingStore:
    return get_store()


def get_request_context(
    x_actor_role: str = Header(Role.admin.value),
    x_professional_id: Optional[str] = Header(None),
) -> RequestContext:
    try:
        role = Role(x_actor_role.lower())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Unknown role {x_actor_role!r}") from exc
    if role is Role.professional and not x_professional_id:
        raise HTTPException(status_code=400, detail="X-Professional-Id is required for professionals")
    return RequestContext(role=role, professional_id=x_professional_id)


def get_booking_service(
    store: SchedulingStore = Depends(get_scheduling_store),
    settings: Settings = Depends(get_settings),
) -> BookingService:
    return BookingService(store, settings=settings)


def get_block_rule_service(
    store: SchedulingStore = Depends(get_scheduling_store),
) -> BlockRuleService:
    return BlockRuleService(store)


def get_waitlist_service(
    store: SchedulingStore = Depends(get_scheduling_store),
) -> WaitlistService:
    return WaitlistService(store)


def get_commission_report_service(
    store: SchedulingStore = Depends(get_scheduling_store),
) -> CommissionReportService:
    return CommissionReportService(store)
