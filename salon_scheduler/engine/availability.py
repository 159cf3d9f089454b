"""Slot availability and enumeration.

``is_slot_available`` is the single predicate every booking path goes
through: manual booking, slot listing and waitlist promotion. A slot is
bookable when no block rule matches it and it does not overlap any
non-cancelled appointment of the same professional on the same date.

Overlap uses half-open intervals, so back-to-back appointments
(10:00-10:30 followed by 10:30-11:00) are allowed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Mapping, Optional

from salon_scheduler.engine.block_rules import DEFAULT_SLOT_MINUTES, matching_rule
from salon_scheduler.engine.time_utils import (
    from_minutes,
    intervals_overlap,
    local_now,
    minute_of_day,
    to_minutes,
)
from salon_scheduler.schemas.appointment import Appointment, AppointmentStatus
from salon_scheduler.schemas.block_rule import BlockRule
from salon_scheduler.schemas.catalog import CatalogItem
from salon_scheduler.services.exceptions import InvalidTimeFormatError

logger = logging.getLogger(__name__)

Catalog = Mapping[str, CatalogItem]


@dataclass(frozen=True)
class Conflict:
    """Why a slot is not bookable."""

    kind: str  # "block" | "appointment"
    ref_id: str
    reason: Optional[str] = None


def resolve_duration(service_id: str, catalog: Optional[Catalog]) -> int:
    """Duration of a catalog item, falling back to one slot for dangling references."""

    item = catalog.get(service_id) if catalog else None
    if item is None:
        logger.warning(
            "Service %s not found in catalog, assuming %s minutes",
            service_id,
            DEFAULT_SLOT_MINUTES,
        )
        return DEFAULT_SLOT_MINUTES
    return item.duration_minutes


def occupies(appointment: Appointment, professional_id: str, day: date) -> bool:
    return (
        appointment.professional_id == professional_id
        and appointment.date == day
        and appointment.status != AppointmentStatus.cancelled
    )


def find_conflict(
    professional_id: str,
    day: date,
    time: str,
    duration_minutes: int,
    appointments: Iterable[Appointment],
    rules: Iterable[BlockRule],
    catalog: Optional[Catalog] = None,
) -> Optional[Conflict]:
    """Return the first block rule or appointment that makes the slot unavailable."""

    rule = matching_rule(rules, professional_id, day, time, duration_minutes)
    if rule is not None:
        return Conflict(kind="block", ref_id=rule.id, reason=rule.reason)

    req_start = to_minutes(time)
    req_end = req_start + duration_minutes

    for appointment in appointments:
        if not occupies(appointment, professional_id, day):
            continue
        try:
            existing_start = to_minutes(appointment.time)
        except InvalidTimeFormatError:
            logger.warning("Appointment %s has a malformed time %r, ignoring", appointment.id, appointment.time)
            continue
        existing_end = existing_start + resolve_duration(appointment.service_id, catalog)
        if intervals_overlap(req_start, req_end, existing_start, existing_end):
            return Conflict(kind="appointment", ref_id=appointment.id)
    return None


def is_slot_available(
    professional_id: str,
    day: date,
    time: str,
    duration_minutes: int,
    appointments: Iterable[Appointment],
    rules: Iterable[BlockRule],
    catalog: Optional[Catalog] = None,
) -> bool:
    return (
        find_conflict(professional_id, day, time, duration_minutes, appointments, rules, catalog)
        is None
    )


def enumerate_slots(
    professional_id: str,
    day: date,
    service_duration: int,
    appointments: Iterable[Appointment],
    rules: Iterable[BlockRule],
    catalog: Optional[Catalog] = None,
    *,
    granularity_minutes: int = DEFAULT_SLOT_MINUTES,
    day_start: str = "08:00",
    day_end: str = "20:00",
    now: Optional[datetime] = None,
) -> List[str]:
    """List bookable start times for a day, ascending.

    Candidates are the ``granularity_minutes`` boundaries in
    ``[day_start, day_end)``. When ``day`` is today, only starts strictly
    after the current local minute are returned.
    """

    if granularity_minutes <= 0:
        raise ValueError("granularity_minutes must be positive")

    start = to_minutes(day_start)
    end = to_minutes(day_end)
    now = now or local_now()
    cutoff = minute_of_day(now) if day == now.date() else None

    relevant = [a for a in appointments if occupies(a, professional_id, day)]
    rules = list(rules)

    slots: List[str] = []
    for minute in range(start, end, granularity_minutes):
        if cutoff is not None and minute <= cutoff:
            continue
        candidate = from_minutes(minute)
        if is_slot_available(
            professional_id, day, candidate, service_duration, relevant, rules, catalog
        ):
            slots.append(candidate)
    return slots
