"""Queue partitions.

A partition is the ``(provider_id, date)`` scope in which queue positions are
ordered. Only appointments in the active set hold a meaningful position.
"""

from __future__ import annotations

from typing import Iterable, List, NamedTuple

from queuetrack.schemas.appointment import Appointment

ACTIVE_STATUSES = frozenset({"scheduled", "in-progress"})
TERMINAL_STATUSES = frozenset({"completed", "cancelled", "no-show"})


class PartitionKey(NamedTuple):
    provider_id: str
    date: str

    @classmethod
    def of(cls, appointment: Appointment) -> "PartitionKey":
        return cls(appointment.provider_id, appointment.date)


def is_active(appointment: Appointment) -> bool:
    return appointment.status in ACTIVE_STATUSES


def active_set(records: Iterable[Appointment]) -> List[Appointment]:
    """Return the active appointments of ``records`` ordered by queue position."""
    active = [record for record in records if is_active(record)]
    active.sort(key=lambda record: (record.queue_position or 0, record.start_time))
    return active
