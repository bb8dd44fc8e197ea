from __future__ import annotations

from datetime import date as date_type
from datetime import time
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

AppointmentStatus = Literal["scheduled", "in-progress", "completed", "cancelled", "no-show"]


class AppointmentCreateRequest(BaseModel):
    """Booking draft: everything the caller knows before a queue slot exists."""

    service_id: str = Field(..., min_length=1)
    provider_id: str = Field(..., min_length=1)
    customer_id: str = Field(..., min_length=1)
    customer_name: str = ""
    date: str = Field(..., description="ISO date (YYYY-MM-DD)")
    start_time: str = Field(..., description="Wall-clock start, HH:MM")
    end_time: str = Field(..., description="Wall-clock end, HH:MM")

    @field_validator("date")
    def _validate_date(cls, value: str) -> str:
        # Normalised so one calendar day always maps to one queue.
        try:
            return date_type.fromisoformat(value).isoformat()
        except ValueError as exc:
            raise ValueError("date must be an ISO date (YYYY-MM-DD)") from exc

    @field_validator("start_time", "end_time")
    def _validate_time(cls, value: str) -> str:
        try:
            return time.fromisoformat(value).strftime("%H:%M")
        except ValueError as exc:
            raise ValueError("time must be formatted as HH:MM") from exc


class Appointment(BaseModel):
    id: str
    service_id: str
    service_name: str = ""
    provider_id: str
    provider_name: str = ""
    customer_id: str
    customer_name: str = ""
    date: str
    start_time: str
    end_time: str
    status: AppointmentStatus = "scheduled"
    queue_position: Optional[int] = Field(None, ge=1)
    estimated_wait_time: Optional[int] = Field(None, ge=0)
    created_at: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: AppointmentStatus


class AppointmentListResponse(BaseModel):
    total: int
    items: List[Appointment]
