"""Block rule evaluation.

A rule suppresses availability for one professional (or every professional
when its ``professional_id`` is ``"all"``) on a single date or on a weekday
every week, either for the whole day or for a ``[start_time, end_time)``
window. Any matching rule blocks the slot; there is no notion of a more
specific rule winning.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional

from salon_scheduler.engine.time_utils import intervals_overlap, to_minutes, week_day_of
from salon_scheduler.schemas.block_rule import ALL_PROFESSIONALS, BlockRule, BlockScope, BlockType
from salon_scheduler.services.exceptions import InvalidTimeFormatError

logger = logging.getLogger(__name__)

DEFAULT_SLOT_MINUTES = 30


def rule_problems(rule) -> List[str]:
    """Return the consistency problems of a rule (or a rule creation request).

    An empty list means the rule names exactly one of date/week_day matching its
    type, and carries a valid time window exactly when its scope is ``slot``.
    """

    problems: List[str] = []
    rule_type = BlockType(rule.type)
    scope = BlockScope(rule.scope)

    if rule_type is BlockType.single:
        if rule.date is None:
            problems.append("single rules require a date")
        if rule.week_day is not None:
            problems.append("single rules cannot carry a week_day")
    else:
        if rule.week_day is None:
            problems.append("recurring rules require a week_day")
        elif not 0 <= rule.week_day <= 6:
            problems.append("week_day must be between 0 (Sunday) and 6 (Saturday)")
        if rule.date is not None:
            problems.append("recurring rules cannot carry a date")

    if scope is BlockScope.slot:
        if not rule.start_time or not rule.end_time:
            problems.append("slot rules require start_time and end_time")
        else:
            try:
                start = to_minutes(rule.start_time)
                end = to_minutes(rule.end_time)
            except InvalidTimeFormatError as exc:
                problems.append(str(exc))
            else:
                if start >= end:
                    problems.append("start_time must be before end_time")
    elif rule.start_time or rule.end_time:
        problems.append("day rules cannot carry start_time or end_time")

    return problems


def is_well_formed(rule: BlockRule) -> bool:
    return not rule_problems(rule)


def applies_to(rule: BlockRule, professional_id: str) -> bool:
    if not rule.professional_id or rule.professional_id == ALL_PROFESSIONALS:
        return True
    return rule.professional_id == professional_id


def _date_matches(rule: BlockRule, day: date, week_day: int) -> bool:
    if rule.type == BlockType.single:
        return rule.date == day
    return rule.week_day == week_day


def matching_rule(
    rules: Iterable[BlockRule],
    professional_id: str,
    day: date,
    time: str,
    duration_minutes: int = DEFAULT_SLOT_MINUTES,
) -> Optional[BlockRule]:
    """Return the first rule blocking ``[time, time + duration)``, if any.

    Raises ``InvalidTimeFormatError`` for a malformed ``time``. Malformed
    stored rules are ignored rather than raised so one bad row cannot take the
    whole calendar down.
    """

    req_start = to_minutes(time)
    req_end = req_start + duration_minutes
    week_day = week_day_of(day)

    for rule in rules:
        if not applies_to(rule, professional_id):
            continue
        problems = rule_problems(rule)
        if problems:
            logger.debug("Ignoring malformed block rule %s: %s", rule.id, "; ".join(problems))
            continue
        if not _date_matches(rule, day, week_day):
            continue
        if rule.scope == BlockScope.day:
            return rule
        rule_start = to_minutes(rule.start_time)
        rule_end = to_minutes(rule.end_time)
        if intervals_overlap(req_start, req_end, rule_start, rule_end):
            return rule
    return None

