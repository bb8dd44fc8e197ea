from __future__ import annotations

import logging
from typing import Dict, FrozenSet

from queuetrack.schemas.appointment import Appointment, AppointmentStatus
from queuetrack.services.exceptions import InvalidTransitionError, NotFoundError
from queuetrack.services.partition import TERMINAL_STATUSES, PartitionKey
from queuetrack.services.queue_engine import QueueAssignmentEngine
from queuetrack.services.store import AppointmentStore

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "scheduled": frozenset({"in-progress", "cancelled", "no-show"}),
    "in-progress": frozenset({"completed", "no-show"}),
}


def validate_transition(current: str, requested: str) -> None:
    if requested not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(current, requested)


class StatusTransitionValidator:
    """Applies status changes and, for terminal ones, the queue recompute in the same write."""

    def __init__(self, store: AppointmentStore, engine: QueueAssignmentEngine) -> None:
        self._store = store
        self._engine = engine

    async def transition(self, appointment_id: str, new_status: AppointmentStatus) -> Appointment:
        record = await self._store.get(appointment_id)
        if record is None:
            raise NotFoundError(f"Appointment '{appointment_id}' not found")

        key = PartitionKey.of(record)
        async with self._store.partition_lock(key):
            partition = await self._store.load_partition(key)
            appointment = next((item for item in partition if item.id == appointment_id), None)
            if appointment is None:
                raise NotFoundError(f"Appointment '{appointment_id}' not found")

            previous = appointment.status
            validate_transition(previous, new_status)
            appointment.status = new_status

            changed = [appointment]
            if new_status in TERMINAL_STATUSES:
                changed.extend(self._engine.close_gap(partition, appointment))
            await self._store.save_partition(key, changed)

        logger.info(
            "Appointment %s moved from %s to %s (%d siblings shifted)",
            appointment_id,
            previous,
            new_status,
            len(changed) - 1,
        )
        return appointment
