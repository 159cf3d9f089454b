from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from salon_scheduler.config import Settings, get_settings
from salon_scheduler.context import ADMIN_CONTEXT, RequestContext
from salon_scheduler.engine.availability import (
    enumerate_slots,
    find_conflict,
    is_slot_available,
    resolve_duration,
)
from salon_scheduler.engine.block_rules import DEFAULT_SLOT_MINUTES
from salon_scheduler.engine.commission import commission, final_price
from salon_scheduler.engine.time_utils import local_now
from salon_scheduler.engine.waitlist import promote_after_cancellation
from salon_scheduler.schemas.appointment import (
    Appointment,
    AppointmentBookRequest,
    AppointmentCancelRequest,
    AppointmentCancelResponse,
    AppointmentCompleteRequest,
    AppointmentListRequest,
    AppointmentListResponse,
    AppointmentStatus,
)
from salon_scheduler.schemas.availability import (
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    SlotListRequest,
    SlotListResponse,
)
from salon_scheduler.schemas.catalog import CatalogItem, ItemType
from salon_scheduler.schemas.professional import Professional
from salon_scheduler.schemas.waitlist import ANY_PROFESSIONAL
from salon_scheduler.services.exceptions import (
    InvalidStateError,
    NotFoundError,
    SlotUnavailableError,
)
from salon_scheduler.services.store import SchedulingStore, get_store

logger = logging.getLogger(__name__)

_FINAL_STATUSES = {AppointmentStatus.cancelled, AppointmentStatus.completed}


class BookingService:
    """Slot listing, booking, cancellation with waitlist promotion, and checkout."""

    def __init__(
        self,
        store: SchedulingStore | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        self._store = store or get_store()
        self._settings = settings or get_settings()

    def _require_service(self, service_id: str) -> CatalogItem:
        item = self._store.master_data.get_item(service_id)
        if item is None or item.type is not ItemType.service:
            raise NotFoundError("Service", service_id)
        return item

    def _require_professional(self, professional_id: str) -> Professional:
        professional = self._store.master_data.get_professional(professional_id)
        if professional is None:
            raise NotFoundError("Professional", professional_id)
        return professional

    def _candidate_professionals(self, professional_id: str) -> List[Professional]:
        if professional_id == ANY_PROFESSIONAL:
            return self._store.master_data.iter_professionals(active_only=True)
        professional = self._require_professional(professional_id)
        return [professional] if professional.active else []

    async def _require_appointment(self, appointment_id: str) -> Appointment:
        appointment = await self._store.appointments.get(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    async def list_slots(
        self, request: SlotListRequest, *, now: Optional[datetime] = None
    ) -> SlotListResponse:
        service = self._require_service(request.service_id)
        now = now or local_now()
        today = now.date()
        # booking_horizon_days calendar days, today included.
        horizon = today + timedelta(days=self._settings.booking_horizon_days)

        response = SlotListResponse(
            professional_id=request.professional_id,
            date=request.date,
            service_id=service.id,
            duration_minutes=service.duration_minutes,
            slots=[],
        )
        if request.date < today or request.date >= horizon:
            logger.info("Slot listing for %s is outside the booking window", request.date)
            return response

        professionals = self._candidate_professionals(request.professional_id)
        if not professionals:
            return response

        rules = await self._store.block_rules.list()
        catalog = self._store.master_data.catalog()
        slots: set[str] = set()
        for professional in professionals:
            appointments = await self._store.appointments.list(
                professional_id=professional.id, day=request.date
            )
            slots.update(
                enumerate_slots(
                    professional.id,
                    request.date,
                    service.duration_minutes,
                    appointments,
                    rules,
                    catalog,
                    granularity_minutes=self._settings.slot_granularity_minutes,
                    day_start=self._settings.day_start,
                    day_end=self._settings.day_end,
                    now=now,
                )
            )

        # Zero-padded HH:MM sorts chronologically.
        response.slots = sorted(slots)
        response.waitlist_suggested = not response.slots
        return response

    async def check(self, request: AvailabilityCheckRequest) -> AvailabilityCheckResponse:
        self._require_professional(request.professional_id)
        catalog = self._store.master_data.catalog()
        if request.duration_minutes is not None:
            duration = request.duration_minutes
        elif request.service_id is not None:
            duration = resolve_duration(request.service_id, catalog)
        else:
            duration = DEFAULT_SLOT_MINUTES

        appointments = await self._store.appointments.list(
            professional_id=request.professional_id, day=request.date
        )
        rules = await self._store.block_rules.list()
        conflict = find_conflict(
            request.professional_id,
            request.date,
            request.time,
            duration,
            appointments,
            rules,
            catalog,
        )
        if conflict is None:
            return AvailabilityCheckResponse(available=True, duration_minutes=duration)
        return AvailabilityCheckResponse(
            available=False,
            duration_minutes=duration,
            blocked_by=f"{conflict.kind}:{conflict.ref_id}",
            reason=conflict.reason,
        )

    async def book(self, request: AppointmentBookRequest) -> Appointment:
        logger.info(
            "Booking %s for %s on %s at %s",
            request.service_id,
            request.client.name,
            request.date,
            request.time,
        )
        service = self._require_service(request.service_id)
        professionals = self._candidate_professionals(request.professional_id)
        if not professionals:
            raise InvalidStateError(f"Professional {request.professional_id} is not accepting bookings")

        catalog = self._store.master_data.catalog()
        for professional in professionals:
            async with self._store.locks.for_slot(professional.id, request.date):
                appointments = await self._store.appointments.list(
                    professional_id=professional.id, day=request.date
                )
                rules = await self._store.block_rules.list()
                if not is_slot_available(
                    professional.id,
                    request.date,
                    request.time,
                    service.duration_minutes,
                    appointments,
                    rules,
                    catalog,
                ):
                    continue

                appointment = Appointment(
                    id=self._store.appointments.next_id(),
                    service_id=service.id,
                    professional_id=professional.id,
                    date=request.date,
                    time=request.time,
                    client=request.client,
                    client_account_id=request.client_account_id,
                    status=AppointmentStatus(request.status),
                    total_price=service.price,
                    notes=request.notes,
                    created_at=local_now(),
                )
                await self._store.appointments.add(appointment)
                logger.info("Booked %s with %s", appointment.id, professional.id)
                return appointment

        raise SlotUnavailableError(
            f"{request.time} on {request.date.isoformat()} is not available for {service.name}"
        )

    async def list(
        self,
        request: AppointmentListRequest,
        context: RequestContext = ADMIN_CONTEXT,
    ) -> AppointmentListResponse:
        professional_id = request.professional_id
        if not context.is_admin:
            professional_id = context.professional_id

        items = await self._store.appointments.list(
            professional_id=professional_id, day=request.date, status=request.status
        )
        start = (request.page - 1) * request.page_size
        end = start + request.page_size
        return AppointmentListResponse(
            total=len(items),
            page=request.page,
            page_size=request.page_size,
            items=items[start:end],
        )

    async def cancel(self, request: AppointmentCancelRequest) -> AppointmentCancelResponse:
        """Cancel an appointment and hand its slot to the first fitting waitlist entry.

        The cancellation and the promotion are decided and written under the
        same (professional, date) lock, against a view that already has the
        appointment cancelled.
        """

        appointment = await self._require_appointment(request.appointment_id)
        async with self._store.locks.for_slot(appointment.professional_id, appointment.date):
            appointment = await self._require_appointment(request.appointment_id)
            if appointment.status in _FINAL_STATUSES:
                raise InvalidStateError(
                    f"Appointment {appointment.id} is already {appointment.status.value}"
                )

            cancelled = appointment.model_copy(update={"status": AppointmentStatus.cancelled})
            day_appointments = [
                cancelled if item.id == cancelled.id else item
                for item in await self._store.appointments.list(
                    professional_id=cancelled.professional_id, day=cancelled.date
                )
            ]
            rules = await self._store.block_rules.list()
            catalog = self._store.master_data.catalog()
            waitlist = await self._store.waitlist.list(day=cancelled.date)

            promotion = promote_after_cancellation(
                cancelled,
                waitlist,
                catalog,
                lambda professional_id, day, time, duration: is_slot_available(
                    professional_id, day, time, duration, day_appointments, rules, catalog
                ),
                id_factory=self._store.appointments.next_id,
                note=self._settings.waitlist_note,
            )

            await self._store.appointments.update(cancelled)
            logger.info("Cancelled appointment %s", cancelled.id)

            response = AppointmentCancelResponse(appointment=cancelled)
            if promotion is None:
                return response

            promoted = promotion.new_appointment
            await self._store.appointments.add(promoted)
            await self._store.waitlist.delete(promotion.promoted_entry_id)
            await self._store.notifications.create(
                title="Waitlist promotion",
                message=(
                    f"Automatically booked {promoted.client.name} "
                    f"on {promoted.date.isoformat()} at {promoted.time}."
                ),
                type="success",
            )
            logger.info(
                "Promoted waitlist entry %s into appointment %s",
                promotion.promoted_entry_id,
                promoted.id,
            )
            response.promoted_appointment = promoted
            response.promoted_entry_id = promotion.promoted_entry_id
            return response

    async def complete(self, request: AppointmentCompleteRequest) -> Appointment:
        appointment = await self._require_appointment(request.appointment_id)
        if appointment.status in _FINAL_STATUSES or appointment.status == AppointmentStatus.blocked:
            raise InvalidStateError(
                f"Appointment {appointment.id} cannot be completed from {appointment.status.value}"
            )

        extras: List[CatalogItem] = []
        for item_id in request.extra_item_ids:
            item = self._store.master_data.get_item(item_id)
            if item is None:
                raise NotFoundError("Catalog item", item_id)
            extras.append(item)

        notes = appointment.notes or ""
        if extras:
            notes += " | Extras: " + ", ".join(item.name for item in extras)

        completed = appointment.model_copy(
            update={
                "status": AppointmentStatus.completed,
                "payment_method": request.payment_method,
                "discount": request.discount,
                "tip": request.tip,
                "final_price": final_price(
                    appointment.total_price,
                    [item.price for item in extras],
                    discount=request.discount,
                    tip=request.tip,
                ),
                "notes": notes or None,
            }
        )
        completed = completed.model_copy(
            update={
                "commission": commission(
                    completed,
                    self._store.master_data.get_item(completed.service_id),
                    self._store.master_data.get_professional(completed.professional_id),
                )
            }
        )
        await self._store.appointments.update(completed)
        logger.info(
            "Completed appointment %s: charged %.2f, commission %.2f",
            completed.id,
            completed.final_price,
            completed.commission,
        )
        return completed
