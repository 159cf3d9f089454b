from __future__ import annotations

import logging

from salon_scheduler.engine.time_utils import local_now
from salon_scheduler.schemas.appointment import AppointmentBookRequest, ClientInfo
from salon_scheduler.schemas.catalog import ItemType
from salon_scheduler.schemas.waitlist import (
    ANY_PROFESSIONAL,
    WaitlistEntry,
    WaitlistJoinRequest,
    WaitlistListRequest,
    WaitlistListResponse,
    WaitlistPromoteRequest,
    WaitlistPromoteResponse,
    WaitlistWithdrawRequest,
    WaitlistWithdrawResponse,
)
from salon_scheduler.services.booking import BookingService
from salon_scheduler.services.exceptions import NotFoundError
from salon_scheduler.services.store import SchedulingStore, get_store

logger = logging.getLogger(__name__)


class WaitlistService:
    def __init__(self, store: SchedulingStore | None = None) -> None:
        self._store = store or get_store()

    async def join(self, request: WaitlistJoinRequest) -> WaitlistEntry:
        master_data = self._store.master_data
        item = master_data.get_item(request.service_id)
        if item is None or item.type is not ItemType.service:
            raise NotFoundError("Service", request.service_id)
        if (
            request.professional_id != ANY_PROFESSIONAL
            and master_data.get_professional(request.professional_id) is None
        ):
            raise NotFoundError("Professional", request.professional_id)

        entry = WaitlistEntry(
            id=self._store.waitlist.next_id(),
            client_name=request.client_name,
            client_phone=request.client_phone,
            service_id=request.service_id,
            professional_id=request.professional_id,
            date=request.date,
            created_at=local_now(),
        )
        await self._store.waitlist.add(entry)
        logger.info("Added %s to the waitlist for %s", entry.client_name, entry.date)
        return entry

    async def list(self, request: WaitlistListRequest) -> WaitlistListResponse:
        items = await self._store.waitlist.list(request.date)
        items = sorted(items, key=lambda entry: entry.created_at)
        return WaitlistListResponse(total=len(items), items=items)

    async def withdraw(self, request: WaitlistWithdrawRequest) -> WaitlistWithdrawResponse:
        if not await self._store.waitlist.delete(request.entry_id):
            raise NotFoundError("Waitlist entry", request.entry_id)
        logger.info("Removed waitlist entry %s", request.entry_id)
        return WaitlistWithdrawResponse(entry_id=request.entry_id, removed=True)

    async def promote(self, request: WaitlistPromoteRequest) -> WaitlistPromoteResponse:
        """Book a waitlist entry at a time picked by an admin.

        The booking goes through the same checks as any other booking; the
        entry stays on the waitlist when the slot turns out to be taken.
        """

        entry = await self._store.waitlist.get(request.entry_id)
        if entry is None:
            raise NotFoundError("Waitlist entry", request.entry_id)

        appointment = await BookingService(self._store).book(
            AppointmentBookRequest(
                service_id=entry.service_id,
                professional_id=request.professional_id or entry.professional_id,
                date=entry.date,
                time=request.time,
                client=ClientInfo(name=entry.client_name, phone=entry.client_phone),
                status="confirmed",
                notes=request.notes,
            )
        )
        await self._store.waitlist.delete(entry.id)
        logger.info("Promoted waitlist entry %s into appointment %s", entry.id, appointment.id)
        return WaitlistPromoteResponse(entry_id=entry.id, appointment=appointment)
