"""In-memory entity store.

Holds the flat collections the scheduling engine reads: catalog items,
professionals, appointments, block rules, waitlist entries and
notifications. Repositories only store and filter; every scheduling decision
lives in ``salon_scheduler.engine`` and is applied by the services.
"""

from __future__ import annotations

import asyncio
import itertools
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import AsyncIterator, Dict, Iterable, List, Optional, Tuple

from salon_scheduler.config import get_settings
from salon_scheduler.engine.time_utils import local_now
from salon_scheduler.schemas.appointment import Appointment, AppointmentStatus
from salon_scheduler.schemas.block_rule import BlockRule
from salon_scheduler.schemas.catalog import CatalogItem, ItemType
from salon_scheduler.schemas.notification import Notification
from salon_scheduler.schemas.professional import CommissionRates, Professional
from salon_scheduler.schemas.waitlist import WaitlistEntry


class _BaseRepository:
    def __init__(self, prefix: str) -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def next_id(self) -> str:
        return f"{self._prefix}-{next(self._counter):05d}"


class MasterDataRepository:
    """Catalog items and professionals. Edited elsewhere, read by the engine."""

    def __init__(self, *, seed: bool = True) -> None:
        self._items: Dict[str, CatalogItem] = {}
        self._professionals: Dict[str, Professional] = {}
        if seed:
            self._seed()

    def _seed(self) -> None:
        for item in [
            CatalogItem(
                id="s1",
                name="Haircut + Beard",
                price=70.0,
                duration_minutes=60,
                description="Full combo: haircut and beard.",
            ),
            CatalogItem(
                id="s2",
                name="Men's Haircut",
                price=45.0,
                duration_minutes=30,
                description="Classic cut finished with clippers and scissors.",
            ),
            CatalogItem(
                id="s3",
                name="Beard",
                price=30.0,
                duration_minutes=30,
                description="Straight razor beard with hot towel.",
            ),
            CatalogItem(
                id="s4",
                name="Neckline Touch-up",
                price=15.0,
                duration_minutes=15,
                description="Finishing of the neckline only.",
            ),
            CatalogItem(
                id="p1",
                name="Styling Pomade",
                type=ItemType.product,
                price=39.9,
                duration_minutes=0,
            ),
            CatalogItem(
                id="pkg1",
                name="Unlimited Haircuts",
                type=ItemType.subscription,
                price=149.9,
                duration_minutes=0,
                description="Monthly package with unlimited haircuts.",
            ),
        ]:
            self.add_item(item)

        self.add_professional(
            Professional(
                id="b1",
                name="Carlos Silva",
                phone="11999999999",
                description="Classic cuts specialist.",
                commission_rates=CommissionRates(service=50, product=20, subscription=10),
            )
        )
        self.add_professional(
            Professional(
                id="b2",
                name="Marcos Oliveira",
                phone="11988888888",
                description="Fades and bleaching.",
                commission_rates=CommissionRates(service=45, product=15, subscription=5),
            )
        )

    def add_item(self, item: CatalogItem) -> None:
        self._items[item.id] = item

    def get_item(self, item_id: str) -> Optional[CatalogItem]:
        return self._items.get(item_id)

    def iter_items(self) -> Iterable[CatalogItem]:
        return self._items.values()

    def catalog(self) -> Dict[str, CatalogItem]:
        return dict(self._items)

    def add_professional(self, professional: Professional) -> None:
        self._professionals[professional.id] = professional

    def get_professional(self, professional_id: str) -> Optional[Professional]:
        return self._professionals.get(professional_id)

    def iter_professionals(self, *, active_only: bool = False) -> List[Professional]:
        professionals = sorted(self._professionals.values(), key=lambda item: item.id)
        if active_only:
            return [professional for professional in professionals if professional.active]
        return professionals


class AppointmentRepository(_BaseRepository):
    def __init__(self) -> None:
        super().__init__("APT")
        self._appointments: Dict[str, Appointment] = {}

    async def add(self, appointment: Appointment) -> Appointment:
        self._appointments[appointment.id] = appointment.model_copy(deep=True)
        return appointment

    async def update(self, appointment: Appointment) -> Appointment:
        if appointment.id not in self._appointments:
            raise KeyError(f"Appointment {appointment.id} not found")
        self._appointments[appointment.id] = appointment.model_copy(deep=True)
        return appointment

    async def get(self, appointment_id: str) -> Optional[Appointment]:
        appointment = self._appointments.get(appointment_id)
        return appointment.model_copy(deep=True) if appointment is not None else None

    async def list(
        self,
        *,
        professional_id: Optional[str] = None,
        day: Optional[date] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> List[Appointment]:
        items = [
            appointment.model_copy(deep=True)
            for appointment in self._appointments.values()
            if (professional_id is None or appointment.professional_id == professional_id)
            and (day is None or appointment.date == day)
            and (status is None or appointment.status == status)
        ]
        items.sort(key=lambda appointment: (appointment.date, appointment.time, appointment.created_at))
        return items


class BlockRuleRepository(_BaseRepository):
    def __init__(self) -> None:
        super().__init__("BLK")
        self._rules: Dict[str, BlockRule] = {}

    async def add(self, rule: BlockRule) -> BlockRule:
        self._rules[rule.id] = rule.model_copy()
        return rule

    async def get(self, rule_id: str) -> Optional[BlockRule]:
        rule = self._rules.get(rule_id)
        return rule.model_copy() if rule is not None else None

    async def list(self, professional_id: Optional[str] = None) -> List[BlockRule]:
        return [
            rule.model_copy()
            for rule in self._rules.values()
            if professional_id is None or rule.professional_id == professional_id
        ]

    async def delete(self, rule_id: str) -> bool:
        return self._rules.pop(rule_id, None) is not None


class WaitlistRepository(_BaseRepository):
    def __init__(self) -> None:
        super().__init__("WL")
        self._entries: Dict[str, WaitlistEntry] = {}

    async def add(self, entry: WaitlistEntry) -> WaitlistEntry:
        self._entries[entry.id] = entry.model_copy()
        return entry

    async def get(self, entry_id: str) -> Optional[WaitlistEntry]:
        entry = self._entries.get(entry_id)
        return entry.model_copy() if entry is not None else None

    async def list(self, day: Optional[date] = None) -> List[WaitlistEntry]:
        # Insertion order is kept; promotion relies on it to break created_at ties.
        return [
            entry.model_copy()
            for entry in self._entries.values()
            if day is None or entry.date == day
        ]

    async def delete(self, entry_id: str) -> bool:
        return self._entries.pop(entry_id, None) is not None


class NotificationRepository(_BaseRepository):
    def __init__(self) -> None:
        super().__init__("NTF")
        self._notifications: Dict[str, Notification] = {}

    async def create(
        self,
        *,
        title: str,
        message: str,
        type: str = "info",
        client_account_id: Optional[str] = None,
    ) -> Notification:
        notification = Notification(
            id=self.next_id(),
            title=title,
            message=message,
            type=type,
            client_account_id=client_account_id,
            created_at=local_now(),
        )
        self._notifications[notification.id] = notification
        return notification

    async def list(self, client_account_id: Optional[str] = None) -> List[Notification]:
        items = [
            notification.model_copy()
            for notification in self._notifications.values()
            if client_account_id is None
            or notification.client_account_id in (None, client_account_id)
        ]
        items.sort(key=lambda notification: notification.created_at, reverse=True)
        return items


class SlotLockRegistry:
    """One ``asyncio.Lock`` per (professional, date).

    Booking and cancellation read appointments, decide, then write; holding
    the lock for the affected professional and date keeps two concurrent
    requests from both passing the availability check.

    A lock only lives while someone holds or waits for it, so the registry
    does not grow with every date ever touched.
    """

    def __init__(self) -> None:
        self._locks: Dict[Tuple[str, date], asyncio.Lock] = {}
        self._users: Dict[Tuple[str, date], int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def for_slot(self, professional_id: str, day: date) -> AsyncIterator[None]:
        key = (professional_id, day)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]


@dataclass
class SchedulingStore:
    master_data: MasterDataRepository
    appointments: AppointmentRepository
    block_rules: BlockRuleRepository
    waitlist: WaitlistRepository
    notifications: NotificationRepository
    locks: SlotLockRegistry = field(default_factory=SlotLockRegistry)


def build_store(*, seed: bool = True) -> SchedulingStore:
    return SchedulingStore(
        master_data=MasterDataRepository(seed=seed),
        appointments=AppointmentRepository(),
        block_rules=BlockRuleRepository(),
        waitlist=WaitlistRepository(),
        notifications=NotificationRepository(),
    )


_store: Optional[SchedulingStore] = None


def get_store() -> SchedulingStore:
    global _store
    if _store is None:
        _store = build_store(seed=get_settings().seed_demo_data)
    return _store


def reset_store() -> None:
    global _store
    _store = None
