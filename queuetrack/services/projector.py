from __future__ import annotations

import logging
from typing import Iterable

from queuetrack.schemas.appointment import Appointment
from queuetrack.schemas.queue import QueueInfo, QueueStatus
from queuetrack.services.catalog import CatalogRepository
from queuetrack.services.exceptions import NotFoundError
from queuetrack.services.partition import PartitionKey, is_active
from queuetrack.services.store import AppointmentStore

logger = logging.getLogger(__name__)


def projected_wait_time(appointments_ahead: int, average_wait_time: int) -> int:
    """Query-time wait estimate from the current queue depth."""
    return appointments_ahead * average_wait_time


def queue_status(appointment: Appointment, appointments_ahead: int) -> QueueStatus:
    if appointment.status == "completed":
        return "completed"
    if appointment.status == "in-progress":
        return "in-progress"
    if appointments_ahead == 0 and appointment.status == "scheduled":
        return "ready"
    return "waiting"


def build_queue_info(
    appointment: Appointment,
    partition: Iterable[Appointment],
    average_wait_time: int,
) -> QueueInfo:
    # Positions kept on terminal records are history only.
    if not is_active(appointment) or appointment.queue_position is None:
        return QueueInfo(status=queue_status(appointment, 0))

    position = appointment.queue_position
    ahead = sum(
        1
        for record in partition
        if record.id != appointment.id
        and is_active(record)
        and (record.queue_position or 0) < position
    )
    return QueueInfo(
        position=position,
        appointments_ahead=ahead,
        estimated_wait_time=projected_wait_time(ahead, average_wait_time),
        status=queue_status(appointment, ahead),
    )


class QueueInfoProjector:
    """Read-only queue view computed from one snapshot of the store."""

    def __init__(self, store: AppointmentStore, catalog: CatalogRepository) -> None:
        self._store = store
        self._catalog = catalog

    async def project(self, appointment_id: str) -> QueueInfo:
        snapshot = await self._store.load_all()
        appointment = next((record for record in snapshot if record.id == appointment_id), None)
        if appointment is None:
            raise NotFoundError(f"Appointment '{appointment_id}' not found")

        key = PartitionKey.of(appointment)
        partition = [record for record in snapshot if PartitionKey.of(record) == key]
        average = self._catalog.average_wait_time(appointment.provider_id)
        info = build_queue_info(appointment, partition, average)
        logger.debug("Queue info for %s: %s", appointment_id, info.model_dump())
        return info
