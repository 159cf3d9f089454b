import os
import random
import sys
from datetime import date, datetime, timedelta
from typing import Optional

import pytest
from pydantic import ValidationError

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from salon_scheduler.engine.availability import (
    enumerate_slots,
    find_conflict,
    is_slot_available,
)
from salon_scheduler.engine.block_rules import matching_rule, rule_problems
from salon_scheduler.engine.commission import commission, commission_rate, final_price
from salon_scheduler.engine.time_utils import (
    from_minutes,
    local_date_key,
    to_minutes,
    week_day_of,
)
from salon_scheduler.engine.waitlist import WAITLIST_NOTE, promote_after_cancellation
from salon_scheduler.schemas.appointment import Appointment, AppointmentStatus, ClientInfo
from salon_scheduler.schemas.block_rule import BlockRule, BlockScope, BlockType
from salon_scheduler.schemas.catalog import CatalogItem, ItemType
from salon_scheduler.schemas.professional import CommissionRates, Professional
from salon_scheduler.schemas.waitlist import WaitlistEntry
from salon_scheduler.services.exceptions import InvalidTimeFormatError


# 2024-01-07 is a Sunday, 2024-01-08 a Monday.
SUNDAY = date(2024, 1, 7)
MONDAY = date(2024, 1, 8)
CREATED = datetime(2024, 1, 1, 9, 0)

CATALOG = {
    "cut": CatalogItem(id="cut", name="Cut", price=45.0, duration_minutes=30),
    "combo": CatalogItem(id="combo", name="Combo", price=70.0, duration_minutes=60),
    "pomade": CatalogItem(id="pomade", name="Pomade", type=ItemType.product, price=40.0),
}

CARLOS = Professional(
    id="b1",
    name="Carlos",
    commission_rates=CommissionRates(service=50, product=20, subscription=10),
)


def _appointment(
    appointment_id: str = "A1",
    *,
    time: str = "10:00",
    day: date = MONDAY,
    professional_id: str = "b1",
    service_id: str = "cut",
    status: AppointmentStatus = AppointmentStatus.confirmed,
    total_price: float = 45.0,
    final: Optional[float] = None,
) -> Appointment:
    return Appointment(
        id=appointment_id,
        service_id=service_id,
        professional_id=professional_id,
        date=day,
        time=time,
        client=ClientInfo(name="Client " + appointment_id),
        status=status,
        total_price=total_price,
        final_price=final,
        created_at=CREATED,
    )


def _entry(
    entry_id: str,
    *,
    minutes_after: int,
    service_id: str = "cut",
    professional_id: str = "any",
    day: date = MONDAY,
) -> WaitlistEntry:
    return WaitlistEntry(
        id=entry_id,
        client_name="Waiting " + entry_id,
        client_phone="555-0100",
        service_id=service_id,
        professional_id=professional_id,
        date=day,
        created_at=CREATED + timedelta(minutes=minutes_after),
    )


# --------------------------
# Time utilities
# --------------------------

def test_to_minutes_accepts_short_hours_and_round_trips() -> None:
    assert to_minutes("9:05") == 545
    assert to_minutes("23:59") == 1439
    assert from_minutes(to_minutes("08:30")) == "08:30"


@pytest.mark.parametrize("value", ["24:00", "10:60", "1000", "ab:cd", "", "10:5"])
def test_to_minutes_rejects_malformed_times(value: str) -> None:
    with pytest.raises(InvalidTimeFormatError):
        to_minutes(value)


def test_invalid_time_format_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        to_minutes("25:00")


def test_week_day_counts_from_sunday() -> None:
    assert week_day_of(SUNDAY) == 0
    assert week_day_of(MONDAY) == 1
    assert week_day_of(date(2024, 1, 13)) == 6


def test_local_date_key_uses_calendar_fields() -> None:
    assert local_date_key(datetime(2024, 1, 8, 23, 59)) == "2024-01-08"
    assert local_date_key(MONDAY) == "2024-01-08"


# --------------------------
# Block rules
# --------------------------

def test_day_block_beats_every_time() -> None:
    rule = BlockRule(id="R1", professional_id="b1", type=BlockType.single, scope=BlockScope.day, date=MONDAY)

    for time in ("08:00", "12:30", "19:30"):
        assert matching_rule([rule], "b1", MONDAY, time) is rule
    assert matching_rule([rule], "b1", SUNDAY, "08:00") is None
    assert matching_rule([rule], "b2", MONDAY, "08:00") is None


def test_slot_block_uses_half_open_overlap() -> None:
    rule = BlockRule(
        id="R1",
        professional_id="b1",
        type=BlockType.single,
        scope=BlockScope.slot,
        date=MONDAY,
        start_time="10:00",
        end_time="12:00",
    )

    assert matching_rule([rule], "b1", MONDAY, "09:30", 60) is rule
    assert matching_rule([rule], "b1", MONDAY, "08:00", 60) is None
    assert matching_rule([rule], "b1", MONDAY, "12:00", 30) is None


def test_recurring_block_matches_weekday() -> None:
    rule = BlockRule(
        id="R1",
        professional_id="b1",
        type=BlockType.recurring,
        scope=BlockScope.slot,
        week_day=1,
        start_time="08:00",
        end_time="09:00",
    )

    assert matching_rule([rule], "b1", MONDAY, "08:30") is rule
    assert matching_rule([rule], "b1", MONDAY + timedelta(days=7), "08:30") is rule
    assert matching_rule([rule], "b1", MONDAY, "09:00") is None
    assert matching_rule([rule], "b1", SUNDAY, "08:30") is None


@pytest.mark.parametrize("professional_id", ["all", None])
def test_rules_for_all_professionals_apply_to_everyone(professional_id) -> None:
    rule = BlockRule(
        id="R1",
        professional_id=professional_id,
        type=BlockType.single,
        scope=BlockScope.day,
        date=MONDAY,
    )

    assert matching_rule([rule], "b1", MONDAY, "10:00") is rule
    assert matching_rule([rule], "b2", MONDAY, "10:00") is rule


def test_malformed_rules_never_match() -> None:
    rules = [
        BlockRule(id="R1", type=BlockType.single, scope=BlockScope.day),
        BlockRule(id="R2", type=BlockType.recurring, scope=BlockScope.day, date=MONDAY),
        BlockRule(
            id="R3",
            type=BlockType.single,
            scope=BlockScope.slot,
            date=MONDAY,
            start_time="12:00",
            end_time="10:00",
        ),
        BlockRule(
            id="R4",
            type=BlockType.single,
            scope=BlockScope.slot,
            date=MONDAY,
            start_time="noon",
            end_time="13:00",
        ),
        BlockRule(id="R5", type=BlockType.single, scope=BlockScope.slot, date=MONDAY),
    ]

    assert matching_rule(rules, "b1", MONDAY, "11:00") is None
    assert all(rule_problems(rule) for rule in rules)


def test_matching_rule_rejects_malformed_request_time() -> None:
    with pytest.raises(InvalidTimeFormatError):
        matching_rule([], "b1", MONDAY, "9h30")


# --------------------------
# Availability
# --------------------------

def test_back_to_back_appointments_are_allowed() -> None:
    existing = [_appointment(time="10:00")]

    assert not is_slot_available("b1", MONDAY, "10:15", 30, existing, [], CATALOG)
    assert is_slot_available("b1", MONDAY, "10:30", 30, existing, [], CATALOG)
    assert is_slot_available("b1", MONDAY, "09:30", 30, existing, [], CATALOG)


def test_existing_duration_comes_from_catalog() -> None:
    existing = [_appointment(time="10:00", service_id="combo")]

    assert not is_slot_available("b1", MONDAY, "10:30", 30, existing, [], CATALOG)
    assert is_slot_available("b1", MONDAY, "11:00", 30, existing, [], CATALOG)


def test_unknown_service_defaults_to_one_slot() -> None:
    existing = [_appointment(time="10:00", service_id="gone")]

    assert not is_slot_available("b1", MONDAY, "10:15", 30, existing, [], CATALOG)
    assert is_slot_available("b1", MONDAY, "10:30", 30, existing, [], CATALOG)


def test_cancelled_and_foreign_appointments_do_not_occupy() -> None:
    existing = [
        _appointment("A1", status=AppointmentStatus.cancelled),
        _appointment("A2", professional_id="b2"),
        _appointment("A3", day=SUNDAY),
    ]

    assert is_slot_available("b1", MONDAY, "10:00", 30, existing, [], CATALOG)


def test_find_conflict_reports_the_blocking_record() -> None:
    rule = BlockRule(
        id="R1",
        professional_id="b1",
        type=BlockType.single,
        scope=BlockScope.slot,
        date=MONDAY,
        start_time="14:00",
        end_time="15:00",
        reason="Lunch",
    )
    existing = [_appointment("A1", time="10:00")]

    conflict = find_conflict("b1", MONDAY, "14:30", 30, existing, [rule], CATALOG)
    assert conflict is not None
    assert (conflict.kind, conflict.ref_id, conflict.reason) == ("block", "R1", "Lunch")

    conflict = find_conflict("b1", MONDAY, "10:00", 30, existing, [rule], CATALOG)
    assert conflict is not None
    assert (conflict.kind, conflict.ref_id) == ("appointment", "A1")


def test_availability_is_idempotent() -> None:
    existing = [_appointment(time="10:00")]
    results = {is_slot_available("b1", MONDAY, "10:00", 30, existing, [], CATALOG) for _ in range(3)}
    assert results == {False}


def test_enumerate_slots_covers_opening_hours() -> None:
    now = datetime(2024, 1, 1, 7, 0)
    slots = enumerate_slots("b1", MONDAY, 30, [], [], CATALOG, now=now)

    assert slots[0] == "08:00"
    assert slots[-1] == "19:30"
    assert len(slots) == 24


def test_enumerate_slots_skips_taken_and_blocked_times() -> None:
    now = datetime(2024, 1, 1, 7, 0)
    existing = [_appointment(time="09:00", service_id="combo")]
    rule = BlockRule(
        id="R1",
        professional_id="b1",
        type=BlockType.single,
        scope=BlockScope.slot,
        date=MONDAY,
        start_time="12:00",
        end_time="13:00",
    )

    slots = enumerate_slots(
        "b1", MONDAY, 30, existing, [rule], CATALOG, day_start="08:00", day_end="14:00", now=now
    )

    assert slots == ["08:00", "08:30", "10:00", "10:30", "11:00", "11:30", "13:00", "13:30"]


def test_enumerate_slots_drops_past_starts_today() -> None:
    now = datetime(2024, 1, 8, 10, 0)
    slots = enumerate_slots("b1", MONDAY, 30, [], [], CATALOG, day_end="12:00", now=now)

    assert slots == ["10:30", "11:00", "11:30"]


def test_enumerate_slots_honours_granularity() -> None:
    now = datetime(2024, 1, 1, 7, 0)
    slots = enumerate_slots(
        "b1", MONDAY, 15, [], [], CATALOG, granularity_minutes=15, day_start="08:00", day_end="09:00", now=now
    )

    assert slots == ["08:00", "08:15", "08:30", "08:45"]

    with pytest.raises(ValueError):
        enumerate_slots("b1", MONDAY, 30, [], [], CATALOG, granularity_minutes=0, now=now)


@pytest.mark.parametrize("seed", [3, 17, 2024])
def test_availability_matches_brute_force_overlap(seed: int) -> None:
    rng = random.Random(seed)
    statuses = list(AppointmentStatus)

    existing = [
        _appointment(
            f"A{index}",
            time=from_minutes(rng.randrange(8 * 60, 19 * 60, 5)),
            day=rng.choice([SUNDAY, MONDAY]),
            professional_id=rng.choice(["b1", "b2"]),
            service_id=rng.choice(["cut", "combo", "gone"]),
            status=rng.choice(statuses),
        )
        for index in range(12)
    ]

    def expected(start: int, duration: int) -> bool:
        for appointment in existing:
            if appointment.professional_id != "b1" or appointment.date != MONDAY:
                continue
            if appointment.status == AppointmentStatus.cancelled:
                continue
            item = CATALOG.get(appointment.service_id)
            other_start = to_minutes(appointment.time)
            other_end = other_start + (item.duration_minutes if item else 30)
            if start < other_end and other_start < start + duration:
                return False
        return True

    for _ in range(200):
        start = rng.randrange(7 * 60, 21 * 60)
        duration = rng.choice([15, 30, 45, 60, 90])
        actual = is_slot_available("b1", MONDAY, from_minutes(start), duration, existing, [], CATALOG)
        assert actual is expected(start, duration), (from_minutes(start), duration)


# --------------------------
# Waitlist promotion
# --------------------------

def _availability(appointments):
    def check(professional_id, day, time, duration):
        return is_slot_available(professional_id, day, time, duration, appointments, [], CATALOG)

    return check


def test_promotion_is_first_in_first_out() -> None:
    cancelled = _appointment("A1", status=AppointmentStatus.cancelled)
    waitlist = [_entry("W2", minutes_after=10), _entry("W1", minutes_after=5)]

    result = promote_after_cancellation(
        cancelled, waitlist, CATALOG, _availability([cancelled]), id_factory=lambda: "NEW"
    )

    assert result is not None
    assert result.promoted_entry_id == "W1"
    appointment = result.new_appointment
    assert appointment.id == "NEW"
    assert appointment.status == AppointmentStatus.confirmed
    assert (appointment.professional_id, appointment.date, appointment.time) == ("b1", MONDAY, "10:00")
    assert appointment.client.name == "Waiting W1"
    assert appointment.total_price == 45.0
    assert appointment.notes == WAITLIST_NOTE


def test_promotion_skips_entries_that_do_not_fit() -> None:
    cancelled = _appointment("A1", time="10:00", status=AppointmentStatus.cancelled)
    following = _appointment("A2", time="10:30")
    waitlist = [
        _entry("W1", minutes_after=1, day=SUNDAY),
        _entry("W2", minutes_after=2, professional_id="b2"),
        _entry("W3", minutes_after=3, service_id="combo"),
        _entry("W4", minutes_after=4, service_id="gone"),
        _entry("W5", minutes_after=5, professional_id="b1"),
        _entry("W6", minutes_after=6),
    ]

    result = promote_after_cancellation(
        cancelled, waitlist, CATALOG, _availability([cancelled, following])
    )

    assert result is not None
    assert result.promoted_entry_id == "W5"


def test_promotion_returns_none_when_nobody_fits() -> None:
    cancelled = _appointment("A1", status=AppointmentStatus.cancelled)

    assert promote_after_cancellation(cancelled, [], CATALOG, _availability([cancelled])) is None
    assert (
        promote_after_cancellation(
            cancelled,
            [_entry("W1", minutes_after=1, professional_id="b2")],
            CATALOG,
            _availability([cancelled]),
        )
        is None
    )


def test_promotion_needs_the_post_cancellation_view() -> None:
    still_booked = _appointment("A1")
    waitlist = [_entry("W1", minutes_after=1)]

    assert promote_after_cancellation(still_booked, waitlist, CATALOG, _availability([still_booked])) is None


def test_promotion_ties_keep_insertion_order() -> None:
    cancelled = _appointment("A1", status=AppointmentStatus.cancelled)
    waitlist = [
        _entry("W-first", minutes_after=5),
        _entry("W-second", minutes_after=5),
        _entry("W-third", minutes_after=5),
    ]

    result = promote_after_cancellation(cancelled, waitlist, CATALOG, _availability([cancelled]))

    assert result is not None
    assert result.promoted_entry_id == "W-first"


def test_promotion_never_books_products() -> None:
    cancelled = _appointment("A1", status=AppointmentStatus.cancelled)
    waitlist = [
        _entry("W1", minutes_after=1, service_id="pomade"),
        _entry("W2", minutes_after=2),
    ]

    result = promote_after_cancellation(cancelled, waitlist, CATALOG, _availability([cancelled]))

    assert result is not None
    assert result.promoted_entry_id == "W2"
    assert result.new_appointment.service_id == "cut"

    assert promote_after_cancellation(cancelled, waitlist[:1], CATALOG, _availability([cancelled])) is None


# --------------------------
# Commission and checkout
# --------------------------

def test_item_override_beats_professional_rate() -> None:
    item = CatalogItem(id="x", name="X", price=100.0, duration_minutes=30, commission_rate=20)
    appointment = _appointment(service_id="x", total_price=100.0)

    assert commission_rate(item, CARLOS) == 20
    assert commission(appointment, item, CARLOS) == pytest.approx(20.0)


def test_zero_override_falls_back_to_professional_rate() -> None:
    item = CatalogItem(id="x", name="X", price=100.0, duration_minutes=30, commission_rate=0)

    assert commission_rate(item, CARLOS) == 50


def test_rate_follows_item_type() -> None:
    assert commission_rate(CATALOG["pomade"], CARLOS) == 20
    assert commission_rate(None, CARLOS) == 50
    assert commission_rate(CATALOG["cut"], None) == 0


def test_commission_prefers_final_price() -> None:
    appointment = _appointment(total_price=45.0, final=60.0)

    assert commission(appointment, CATALOG["cut"], CARLOS) == pytest.approx(30.0)
    assert commission(appointment, CATALOG["cut"], None) == 0


def test_final_price_never_goes_below_zero_before_tip() -> None:
    assert final_price(45.0, [40.0], discount=5.0, tip=10.0) == pytest.approx(90.0)
    assert final_price(45.0, discount=100.0, tip=5.0) == pytest.approx(5.0)


# --------------------------
# Catalog items
# --------------------------

def test_services_must_take_time() -> None:
    with pytest.raises(ValidationError):
        CatalogItem(id="free", name="Free Cut", price=0.0, duration_minutes=0)

    product = CatalogItem(id="wax", name="Wax", type=ItemType.product, price=12.0, duration_minutes=0)
    assert product.duration_minutes == 0
