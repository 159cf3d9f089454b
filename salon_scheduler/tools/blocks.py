from fastapi import APIRouter, Depends

from salon_scheduler.dependencies.services import get_block_rule_service
from salon_scheduler.schemas.block_rule import (
    BlockRule,
    BlockRuleCreateRequest,
    BlockRuleDeleteRequest,
    BlockRuleDeleteResponse,
    BlockRuleListRequest,
    BlockRuleListResponse,
)
from salon_scheduler.services import BlockRuleService
from salon_scheduler.services.exceptions import ServiceError
from salon_scheduler.tools.errors import to_http_exception

router = APIRouter()


@router.post("/create", response_model=BlockRule, status_code=201)
async def create_block(
    req: BlockRuleCreateRequest,
    service: BlockRuleService = Depends(get_block_rule_service),
):
    try:
        return await service.create(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/list", response_model=BlockRuleListResponse)
async def list_blocks(
    req: BlockRuleListRequest,
    service: BlockRuleService = Depends(get_block_rule_service),
):
    try:
        return await service.list(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/delete", response_model=BlockRuleDeleteResponse)
async def delete_block(
    req: BlockRuleDeleteRequest,
    service: BlockRuleService = Depends(get_block_rule_service),
):
    try:
        return await service.delete(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
