from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ProviderSummary(BaseModel):
    """Lightweight projection of a provider in the catalog."""

    provider_id: str
    name: str
    specialization: Optional[str] = None
    average_wait_time: int = Field(..., ge=0, description="Average minutes per appointment")


class ServiceSummary(BaseModel):
    service_id: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    providers: List[ProviderSummary] = Field(default_factory=list)


class ServiceListResponse(BaseModel):
    total: int
    items: List[ServiceSummary]


class TimeSlot(BaseModel):
    slot_id: str
    provider_id: str
    date: str
    start_time: str
    end_time: str
    is_available: bool


class TimeSlotListResponse(BaseModel):
    provider_id: str
    start_date: str
    days: int
    items: List[TimeSlot]


class ProviderStats(BaseModel):
    provider_id: str
    total_appointments: int
    completed_appointments: int
    no_shows: int
    cancelled_appointments: int
    active_appointments: int
    average_wait_time: int
