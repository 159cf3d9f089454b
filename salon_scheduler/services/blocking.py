from __future__ import annotations

import logging

from salon_scheduler.engine.block_rules import rule_problems
from salon_scheduler.engine.time_utils import normalize_time, week_day_of
from salon_scheduler.schemas.block_rule import (
    ALL_PROFESSIONALS,
    BlockRule,
    BlockRuleCreateRequest,
    BlockRuleDeleteRequest,
    BlockRuleDeleteResponse,
    BlockRuleListRequest,
    BlockRuleListResponse,
    BlockScope,
    BlockType,
)
from salon_scheduler.services.exceptions import AmbiguousBlockRuleError, NotFoundError
from salon_scheduler.services.store import SchedulingStore, get_store

logger = logging.getLogger(__name__)


class BlockRuleService:
    def __init__(self, store: SchedulingStore | None = None) -> None:
        self._store = store or get_store()

    async def create(self, request: BlockRuleCreateRequest) -> BlockRule:
        if (
            request.professional_id != ALL_PROFESSIONALS
            and self._store.master_data.get_professional(request.professional_id) is None
        ):
            raise NotFoundError("Professional", request.professional_id)

        # A weekly rule picked from a calendar day repeats on that day's weekday.
        if request.type == BlockType.recurring and request.week_day is None and request.date is not None:
            request = request.model_copy(
                update={"week_day": week_day_of(request.date), "date": None}
            )

        problems = rule_problems(request)
        if problems:
            raise AmbiguousBlockRuleError(problems)

        is_slot = request.scope == BlockScope.slot
        rule = BlockRule(
            id=self._store.block_rules.next_id(),
            professional_id=request.professional_id,
            type=request.type,
            scope=request.scope,
            date=request.date,
            week_day=request.week_day,
            start_time=normalize_time(request.start_time) if is_slot else None,
            end_time=normalize_time(request.end_time) if is_slot else None,
            reason=request.reason or "Blocked",
        )
        await self._store.block_rules.add(rule)
        logger.info(
            "Created %s %s block %s for %s",
            rule.type.value,
            rule.scope.value,
            rule.id,
            rule.professional_id,
        )
        return rule

    async def list(self, request: BlockRuleListRequest) -> BlockRuleListResponse:
        items = await self._store.block_rules.list(request.professional_id)
        return BlockRuleListResponse(total=len(items), items=items)

    async def delete(self, request: BlockRuleDeleteRequest) -> BlockRuleDeleteResponse:
        rule = await self._store.block_rules.get(request.rule_id)
        if rule is None:
            raise NotFoundError("Block rule", request.rule_id)

        # A recurring rule is a single row, so this lifts every occurrence.
        await self._store.block_rules.delete(rule.id)
        recurring = rule.type == BlockType.recurring
        if recurring:
            logger.info("Removed recurring block %s for every week_day=%s", rule.id, rule.week_day)
        else:
            logger.info("Removed block %s", rule.id)
        return BlockRuleDeleteResponse(rule_id=rule.id, deleted=True, recurring=recurring)
