from fastapi import APIRouter, Depends

from salon_scheduler.dependencies.services import get_booking_service
from salon_scheduler.schemas.availability import (
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    SlotListRequest,
    SlotListResponse,
)
from salon_scheduler.services import BookingService
from salon_scheduler.services.exceptions import ServiceError
from salon_scheduler.tools.errors import to_http_exception

router = APIRouter()


@router.post("/slots", response_model=SlotListResponse)
async def list_slots(
    req: SlotListRequest,
    service: BookingService = Depends(get_booking_service),
):
    try:
        return await service.list_slots(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/check", response_model=AvailabilityCheckResponse)
async def check_slot(
    req: AvailabilityCheckRequest,
    service: BookingService = Depends(get_booking_service),
):
    try:
        return await service.check(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
