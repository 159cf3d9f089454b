from __future__ import annotations

import asyncio
from datetime import date

from fastapi.testclient import TestClient

from salon_scheduler.main import app
from salon_scheduler.schemas.appointment import AppointmentBookRequest, ClientInfo
from salon_scheduler.schemas.waitlist import WaitlistJoinRequest
from salon_scheduler.services import BookingService, WaitlistService
from salon_scheduler.services.store import reset_store


def test_store_view_renders_seed_data() -> None:
    reset_store()
    client = TestClient(app)

    response = client.get("/store-data")
    assert response.status_code == 200
    body = response.text

    assert "Scheduling Data Overview" in body
    assert "Carlos Silva" in body  # seeded professional
    assert "Haircut + Beard" in body  # seeded service
    assert "No records found." in body  # empty sections show message


def test_store_view_includes_created_records() -> None:
    reset_store()

    asyncio.run(
        BookingService().book(
            AppointmentBookRequest(
                service_id="s2",
                professional_id="b1",
                date=date(2030, 1, 7),
                time="10:00",
                client=ClientInfo(name="Test Client", phone="1234567"),
                notes="Prefers scissors",
            )
        )
    )
    asyncio.run(
        WaitlistService().join(
            WaitlistJoinRequest(
                client_name="Waiting Walter",
                client_phone="7654321",
                service_id="s3",
                date=date(2030, 1, 7),
            )
        )
    )

    client = TestClient(app)
    response = client.get("/store-data")
    assert response.status_code == 200

    body = response.text
    assert "APT-00001" in body
    assert "Test Client" in body  # nested client rendered as JSON
    assert "Prefers scissors" in body
    assert "Waiting Walter" in body
    reset_store()


def test_store_view_columns_follow_model_fields() -> None:
    reset_store()
    client = TestClient(app)

    body = client.get("/store-data").text

    assert "<h2>Block Rules (0)</h2>" in body
    assert "<th>week_day</th>" in body  # empty table still shows BlockRule columns
    assert "<th>commission_rates</th>" in body
    assert "&quot;service&quot;: 50" in body  # nested rates rendered as escaped JSON
    reset_store()
