"""Routes for browsing the records held by the in-memory store."""
from __future__ import annotations

import html
import json
from typing import Any, List, Sequence, Type

from fastapi import APIRouter
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from salon_scheduler.schemas.appointment import Appointment
from salon_scheduler.schemas.block_rule import BlockRule
from salon_scheduler.schemas.catalog import CatalogItem
from salon_scheduler.schemas.notification import Notification
from salon_scheduler.schemas.professional import Professional
from salon_scheduler.schemas.waitlist import WaitlistEntry
from salon_scheduler.services.store import get_store

router = APIRouter()


def _cell(value: Any) -> str:
    """Render one JSON-mode field value; nested models become compact JSON."""
    if value is None:
        text = ""
    elif isinstance(value, (dict, list)):
        text = json.dumps(value, separators=(", ", ": "))
    else:
        text = str(value)
    return f"<td>{html.escape(text)}</td>"


def _model_table(title: str, model: Type[BaseModel], records: Sequence[BaseModel]) -> str:
    # Columns follow the model declaration, so empty tables still show their shape.
    fields: List[str] = list(model.model_fields)
    header = "".join(f"<th>{html.escape(name)}</th>" for name in fields)

    if records:
        rows = []
        for record in records:
            data = record.model_dump(mode="json")
            rows.append("<tr>" + "".join(_cell(data.get(name)) for name in fields) + "</tr>")
        body = "".join(rows)
    else:
        body = f'<tr><td colspan="{len(fields)}">No records found.</td></tr>'

    return (
        f"<section><h2>{html.escape(title)} ({len(records)})</h2>"
        f"<table><thead><tr>{header}</tr></thead><tbody>{body}</tbody></table>"
        "</section>"
    )


@router.get("/store-data", response_class=HTMLResponse)
async def view_store_data() -> HTMLResponse:
    """Render every collection of the shared in-memory store as HTML tables."""
    store = get_store()

    sections = [
        _model_table("Professionals", Professional, store.master_data.iter_professionals()),
        _model_table("Catalog", CatalogItem, list(store.master_data.iter_items())),
        _model_table("Appointments", Appointment, await store.appointments.list()),
        _model_table("Block Rules", BlockRule, await store.block_rules.list()),
        _model_table("Waitlist", WaitlistEntry, await store.waitlist.list()),
        _model_table("Notifications", Notification, await store.notifications.list()),
    ]

    sections_html = "".join(sections)
    html_content = f"""
    <html>
        <head>
            <title>Scheduling Data Overview</title>
            <style>
                body {{ font-family: Arial, sans-serif; margin: 2rem; }}
                h1 {{ text-align: center; }}
                section {{ margin-bottom: 2rem; }}
                table {{ border-collapse: collapse; width: 100%; }}
                th, td {{ border: 1px solid #ccc; padding: 0.5rem; text-align: left; }}
                th {{ background-color: #f0f0f0; }}
                tbody tr:nth-child(even) {{ background-color: #fafafa; }}
            </style>
        </head>
        <body>
            <h1>Scheduling Data Overview</h1>
            {sections_html}
        </body>
    </html>
    """

    return HTMLResponse(content=html_content)
