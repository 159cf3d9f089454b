"""Waitlist promotion after a cancellation.

Entries for the cancelled date are scanned oldest first. The first one whose
professional preference and service duration fit the freed slot becomes a
confirmed appointment. A cancellation frees one appointment-sized slot, so at
most one entry is promoted.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from salon_scheduler.engine.availability import Catalog
from salon_scheduler.engine.time_utils import local_now
from salon_scheduler.schemas.appointment import Appointment, AppointmentStatus, ClientInfo
from salon_scheduler.schemas.catalog import ItemType
from salon_scheduler.schemas.waitlist import ANY_PROFESSIONAL, WaitlistEntry

logger = logging.getLogger(__name__)

WAITLIST_NOTE = "auto-booked from waitlist"

# (professional_id, date, time, duration_minutes) -> bool
AvailabilityCheck = Callable[[str, date, str, int], bool]


@dataclass(frozen=True)
class PromotionResult:
    new_appointment: Appointment
    promoted_entry_id: str


def _default_id() -> str:
    return str(uuid.uuid4())


def promote_after_cancellation(
    cancelled: Appointment,
    waitlist: Iterable[WaitlistEntry],
    catalog: Catalog,
    is_available: AvailabilityCheck,
    *,
    now: Optional[datetime] = None,
    id_factory: Optional[Callable[[], str]] = None,
    note: str = WAITLIST_NOTE,
) -> Optional[PromotionResult]:
    """Pick the waitlist entry that takes over a cancelled appointment's slot.

    ``is_available`` must evaluate against the appointment set that already
    reflects the cancellation, otherwise the freed slot still looks taken.
    Returns ``None`` when nobody fits, which is the common case.
    """

    # sorted() is stable, so equal timestamps keep their insertion order.
    candidates = sorted(
        (entry for entry in waitlist if entry.date == cancelled.date),
        key=lambda entry: entry.created_at,
    )

    for entry in candidates:
        if entry.professional_id not in (ANY_PROFESSIONAL, cancelled.professional_id):
            continue

        service = catalog.get(entry.service_id)
        if service is None or service.type is not ItemType.service:
            logger.warning(
                "Waitlist entry %s references unknown or unbookable service %s, skipping",
                entry.id,
                entry.service_id,
            )
            continue

        if not is_available(
            cancelled.professional_id,
            cancelled.date,
            cancelled.time,
            service.duration_minutes,
        ):
            continue

        appointment = Appointment(
            id=(id_factory or _default_id)(),
            service_id=entry.service_id,
            professional_id=cancelled.professional_id,
            date=cancelled.date,
            time=cancelled.time,
            client=ClientInfo(name=entry.client_name, phone=entry.client_phone),
            status=AppointmentStatus.confirmed,
            total_price=service.price,
            notes=note,
            created_at=now or local_now(),
        )
        return PromotionResult(new_appointment=appointment, promoted_entry_id=entry.id)

    return None
