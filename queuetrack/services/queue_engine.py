"""Queue position assignment and recomputation.

The engine keeps no state between calls: every operation reads the partition
from the store, computes, and writes the partition back while holding that
partition's lock.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from queuetrack.schemas.appointment import Appointment, AppointmentCreateRequest
from queuetrack.services.catalog import CatalogRepository
from queuetrack.services.exceptions import NotFoundError
from queuetrack.services.partition import PartitionKey, active_set, is_active
from queuetrack.services.store import AppointmentStore

logger = logging.getLogger(__name__)

# Fixed slot used when a sibling leaves the queue. Deliberately not the
# provider's catalog average.
WAIT_TIME_DECREMENT_MINUTES = 15


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def seed_wait_time(average_wait_time: int) -> int:
    """Wait estimate stored on a new appointment.

    This is the provider's average service time as-is, independent of the
    position being assigned. Query-time estimates are computed separately by
    the projector from the live queue depth.
    """
    return average_wait_time


def reduce_wait_time(current: Optional[int]) -> Optional[int]:
    """Lower a stored estimate by one fixed slot, never below that slot."""
    if current is None or current <= WAIT_TIME_DECREMENT_MINUTES:
        return current
    return max(current - WAIT_TIME_DECREMENT_MINUTES, WAIT_TIME_DECREMENT_MINUTES)


def close_queue_gap(records: Iterable[Appointment], departing: Appointment) -> List[Appointment]:
    """Move every active appointment queued behind ``departing`` up by one.

    ``records`` is one partition snapshot; matching records are mutated in
    place and returned so the caller can persist them.
    """
    vacated = departing.queue_position
    if vacated is None:
        return []

    shifted: List[Appointment] = []
    for record in records:
        if record.id == departing.id or not is_active(record):
            continue
        if record.queue_position is None or record.queue_position <= vacated:
            continue
        record.queue_position -= 1
        record.estimated_wait_time = reduce_wait_time(record.estimated_wait_time)
        shifted.append(record)
    return shifted


class QueueAssignmentEngine:
    def __init__(self, store: AppointmentStore, catalog: CatalogRepository) -> None:
        self._store = store
        self._catalog = catalog

    async def assign(
        self,
        draft: AppointmentCreateRequest,
        *,
        service_name: str = "",
        provider_name: str = "",
    ) -> Appointment:
        key = PartitionKey(draft.provider_id, draft.date)
        average = self._catalog.average_wait_time(draft.provider_id)

        async with self._store.partition_lock(key):
            partition = await self._store.load_partition(key)
            appointment = Appointment(
                id=f"APT-{uuid.uuid4().hex}",
                service_name=service_name,
                provider_name=provider_name,
                status="scheduled",
                queue_position=len(active_set(partition)) + 1,
                estimated_wait_time=seed_wait_time(average),
                created_at=_utc_now_iso(),
                **draft.model_dump(),
            )
            await self._store.save_partition(key, [appointment])

        logger.info(
            "Assigned %s to position %s for provider %s on %s",
            appointment.id,
            appointment.queue_position,
            key.provider_id,
            key.date,
        )
        return appointment

    def close_gap(self, partition: List[Appointment], departing: Appointment) -> List[Appointment]:
        shifted = close_queue_gap(partition, departing)
        for record in shifted:
            logger.debug(
                "Moved %s to position %s (stored wait %s)",
                record.id,
                record.queue_position,
                record.estimated_wait_time,
            )
        return shifted

    async def on_terminal_transition(self, appointment_id: str) -> List[Appointment]:
        """Close the queue gap left by an appointment whose status is already terminal.

        Returns the siblings whose positions moved.
        """
        record = await self._store.get(appointment_id)
        if record is None:
            raise NotFoundError(f"Appointment '{appointment_id}' not found")

        key = PartitionKey.of(record)
        async with self._store.partition_lock(key):
            partition = await self._store.load_partition(key)
            departing = next((item for item in partition if item.id == appointment_id), None)
            if departing is None:
                raise NotFoundError(f"Appointment '{appointment_id}' not found")
            if is_active(departing):
                logger.warning(
                    "Skipping recompute for %s: status '%s' is still active",
                    appointment_id,
                    departing.status,
                )
                return []
            if any(
                is_active(item) and item.queue_position == departing.queue_position
                for item in partition
                if item.id != appointment_id
            ):
                # Another active record already holds the vacated position.
                logger.info(
                    "Queue gap left by %s is already closed; nothing to shift",
                    appointment_id,
                )
                return []

            shifted = self.close_gap(partition, departing)
            if shifted:
                await self._store.save_partition(key, shifted)

        logger.info(
            "Recomputed queue for provider %s on %s after %s left: %d shifted",
            key.provider_id,
            key.date,
            appointment_id,
            len(shifted),
        )
        return shifted
