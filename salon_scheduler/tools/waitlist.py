from fastapi import APIRouter, Depends

from salon_scheduler.dependencies.services import get_waitlist_service
from salon_scheduler.schemas.waitlist import (
    WaitlistEntry,
    WaitlistJoinRequest,
    WaitlistListRequest,
    WaitlistListResponse,
    WaitlistPromoteRequest,
    WaitlistPromoteResponse,
    WaitlistWithdrawRequest,
    WaitlistWithdrawResponse,
)
from salon_scheduler.services import WaitlistService
from salon_scheduler.services.exceptions import ServiceError
from salon_scheduler.tools.errors import to_http_exception

router = APIRouter()


@router.post("/join", response_model=WaitlistEntry, status_code=201)
async def join_waitlist(
    req: WaitlistJoinRequest,
    service: WaitlistService = Depends(get_waitlist_service),
):
    try:
        return await service.join(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/list", response_model=WaitlistListResponse)
async def list_waitlist(
    req: WaitlistListRequest,
    service: WaitlistService = Depends(get_waitlist_service),
):
    try:
        return await service.list(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/withdraw", response_model=WaitlistWithdrawResponse)
async def withdraw_from_waitlist(
    req: WaitlistWithdrawRequest,
    service: WaitlistService = Depends(get_waitlist_service),
):
    try:
        return await service.withdraw(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/promote", response_model=WaitlistPromoteResponse, status_code=201)
async def promote_from_waitlist(
    req: WaitlistPromoteRequest,
    service: WaitlistService = Depends(get_waitlist_service),
):
    try:
        return await service.promote(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
