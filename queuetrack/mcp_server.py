from __future__ import annotations

import logging
from typing import List

from mcp.server.fastmcp import Context, FastMCP
from pydantic import BaseModel, Field

from queuetrack.schemas.appointment import (
    Appointment,
    AppointmentCreateRequest,
    AppointmentStatus,
)
from queuetrack.schemas.queue import QueueInfo
from queuetrack.services.appointment import AppointmentService

log = logging.getLogger("queuetrack.mcp")

# Name shown to MCP clients
mcp = FastMCP("queuetrack_mcp")


# --------------------------
# Tool I/O models
# --------------------------
class AppointmentStatusInput(BaseModel):
    appointment_id: str = Field(..., description="Appointment identifier, e.g. 'APT-3f2a...'")
    status: AppointmentStatus = Field(..., description="Target status")


class AppointmentLookupInput(BaseModel):
    appointment_id: str


class AppointmentListOutput(BaseModel):
    appointments: List[Appointment]


# --------------------------
# Tools
# --------------------------
@mcp.tool(name="appointments_create", description="Book an appointment and join the provider's queue")
async def appointments_create(input: AppointmentCreateRequest, ctx: Context) -> Appointment:
    log.debug("appointments_create input=%s", input.model_dump())
    out = await AppointmentService().create_appointment(input)
    log.debug("appointments_create output=%s", out.model_dump())
    return out


@mcp.tool(name="appointments_set_status", description="Change an appointment's status")
async def appointments_set_status(input: AppointmentStatusInput, ctx: Context) -> Appointment:
    log.debug("appointments_set_status input=%s", input.model_dump())
    out = await AppointmentService().set_status(input.appointment_id, input.status)
    log.debug("appointments_set_status output=%s", out.model_dump())
    return out


@mcp.tool(name="appointments_queue_info", description="Current queue position and estimated wait")
async def appointments_queue_info(input: AppointmentLookupInput, ctx: Context) -> QueueInfo:
    log.debug("appointments_queue_info input=%s", input.model_dump())
    out = await AppointmentService().get_queue_info(input.appointment_id)
    log.debug("appointments_queue_info output=%s", out.model_dump())
    return out


@mcp.tool(name="appointments_list_by_customer", description="List a customer's appointments")
async def appointments_list_by_customer(customer_id: str) -> AppointmentListOutput:
    log.debug("appointments_list_by_customer %s", customer_id)
    listing = await AppointmentService().list_by_customer(customer_id)
    return AppointmentListOutput(appointments=listing.items)


@mcp.tool(name="appointments_list_by_provider", description="List a provider's appointments")
async def appointments_list_by_provider(provider_id: str) -> AppointmentListOutput:
    log.debug("appointments_list_by_provider %s", provider_id)
    listing = await AppointmentService().list_by_provider(provider_id)
    return AppointmentListOutput(appointments=listing.items)


@mcp.tool(name="ping", description="Health check")
async def ping(message: str) -> str:
    log.debug("ping %s", message)
    return f"pong: {message}"
