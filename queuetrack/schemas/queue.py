from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

QueueStatus = Literal["waiting", "in-progress", "ready", "completed"]


class QueueInfo(BaseModel):
    """Point-in-time view of where an appointment stands in its provider's queue."""

    position: int = Field(0, ge=0)
    appointments_ahead: int = Field(0, ge=0)
    estimated_wait_time: int = Field(0, ge=0, description="Minutes until service starts")
    status: QueueStatus
