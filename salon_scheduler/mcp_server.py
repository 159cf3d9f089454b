# salon_scheduler/mcp_server.py
from __future__ import annotations

import logging
from datetime import date as Date
from typing import Optional

from pydantic import BaseModel, Field
from mcp.server.fastmcp import FastMCP, Context

from salon_scheduler.config import get_settings
from salon_scheduler.schemas.appointment import (
    Appointment,
    AppointmentBookRequest,
    AppointmentCancelRequest,
    AppointmentCancelResponse,
    ClientInfo,
)
from salon_scheduler.schemas.availability import SlotListRequest, SlotListResponse
from salon_scheduler.schemas.waitlist import (
    WaitlistEntry,
    WaitlistJoinRequest,
    WaitlistListRequest,
)
from salon_scheduler.services import BookingService, WaitlistService

log = logging.getLogger("salon.mcp")

# Name shown to clients
mcp = FastMCP("salon_scheduler")

# --------------------------
# Tool I/O models
# --------------------------
class SlotsListInput(BaseModel):
    service_id: str = Field(..., description="Catalog service id, e.g. 's1'")
    professional_id: str = Field("any", description="Professional id, or 'any'")
    date: Date = Field(..., description="Local date, e.g. '2025-10-01'")

class AppointmentsBookInput(BaseModel):
    service_id: str
    professional_id: str = Field("any", description="Professional id, or 'any' for the first free one")
    date: Date
    time: str = Field(..., description="Start time HH:MM, e.g. '09:30'")
    client_name: str
    client_phone: str = ""
    notes: Optional[str] = None

class AppointmentsCancelInput(BaseModel):
    appointment_id: str

class WaitlistJoinInput(BaseModel):
    client_name: str
    client_phone: str
    service_id: str
    professional_id: str = Field("any", description="Professional id, or 'any'")
    date: Date

class WaitlistJoinOutput(BaseModel):
    entry: WaitlistEntry
    position: int

# --------------------------
# Tools
# --------------------------
@mcp.tool(name="slots_list", description="List the free start times for a service on a date")
async def slots_list(input: SlotsListInput, ctx: Context) -> SlotListResponse:
    log.debug("slots_list input=%s", input.model_dump())
    service = BookingService(settings=get_settings())
    out = await service.list_slots(SlotListRequest(**input.model_dump()))
    log.debug("slots_list output=%s", out.model_dump())
    return out

@mcp.tool(name="appointments_book", description="Book an appointment")
async def appointments_book(input: AppointmentsBookInput, ctx: Context) -> Appointment:
    log.debug("appointments_book input=%s", input.model_dump())
    service = BookingService(settings=get_settings())
    request = AppointmentBookRequest(
        service_id=input.service_id,
        professional_id=input.professional_id,
        date=input.date,
        time=input.time,
        client=ClientInfo(name=input.client_name, phone=input.client_phone),
        notes=input.notes,
    )
    out = await service.book(request)
    log.debug("appointments_book output=%s", out.model_dump())
    return out

@mcp.tool(name="appointments_cancel", description="Cancel an appointment and promote the waitlist")
async def appointments_cancel(input: AppointmentsCancelInput, ctx: Context) -> AppointmentCancelResponse:
    log.debug("appointments_cancel input=%s", input.model_dump())
    service = BookingService(settings=get_settings())
    out = await service.cancel(AppointmentCancelRequest(appointment_id=input.appointment_id))
    log.debug("appointments_cancel output=%s", out.model_dump())
    return out

@mcp.tool(name="waitlist_join", description="Join the waitlist for a date")
async def waitlist_join(input: WaitlistJoinInput, ctx: Context) -> WaitlistJoinOutput:
    log.debug("waitlist_join input=%s", input.model_dump())
    service = WaitlistService()
    entry = await service.join(WaitlistJoinRequest(**input.model_dump()))
    waiting = (await service.list(WaitlistListRequest(date=entry.date))).items
    position = [item.id for item in waiting].index(entry.id) + 1
    out = WaitlistJoinOutput(entry=entry, position=position)
    log.debug("waitlist_join output=%s", out.model_dump())
    return out

@mcp.tool(name="ping", description="Health check")
async def ping(message: str) -> str:
    log.debug("ping %s", message)
    return f"pong: {message}"
