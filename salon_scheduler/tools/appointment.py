from fastapi import APIRouter, Depends

from salon_scheduler.context import RequestContext
from salon_scheduler.dependencies.services import get_booking_service, get_request_context
from salon_scheduler.schemas.appointment import (
    Appointment,
    AppointmentBookRequest,
    AppointmentCancelRequest,
    AppointmentCancelResponse,
    AppointmentCompleteRequest,
    AppointmentListRequest,
    AppointmentListResponse,
)
from salon_scheduler.services import BookingService
from salon_scheduler.services.exceptions import ServiceError
from salon_scheduler.tools.errors import to_http_exception

router = APIRouter()


@router.post("/book", response_model=Appointment, status_code=201)
async def book_appointment(
    req: AppointmentBookRequest,
    service: BookingService = Depends(get_booking_service),
):
    try:
        return await service.book(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/list", response_model=AppointmentListResponse)
async def list_appointments(
    req: AppointmentListRequest,
    service: BookingService = Depends(get_booking_service),
    context: RequestContext = Depends(get_request_context),
):
    try:
        return await service.list(req, context)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/cancel", response_model=AppointmentCancelResponse)
async def cancel_appointment(
    req: AppointmentCancelRequest,
    service: BookingService = Depends(get_booking_service),
):
    try:
        return await service.cancel(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/complete", response_model=Appointment)
async def complete_appointment(
    req: AppointmentCompleteRequest,
    service: BookingService = Depends(get_booking_service),
):
    try:
        return await service.complete(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
