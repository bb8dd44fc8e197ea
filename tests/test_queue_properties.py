"""Randomised booking/status sequences checked against the queue invariants."""

import asyncio
import random
from collections import defaultdict

import pytest

from queuetrack.services.appointment import AppointmentService
from queuetrack.services.exceptions import InvalidTransitionError
from queuetrack.services.partition import TERMINAL_STATUSES, PartitionKey, is_active
from queuetrack.services.transitions import ALLOWED_TRANSITIONS

PARTITIONS = [("p1", "s1", "2025-09-06"), ("p1", "s1", "2025-09-07"), ("p2", "s1", "2025-09-06")]
STATUSES = ["scheduled", "in-progress", "completed", "cancelled", "no-show"]


def _check_invariants(records, creation_order) -> None:
    by_partition = defaultdict(list)
    for record in records:
        if is_active(record):
            by_partition[PartitionKey.of(record)].append(record)

    for key, active in by_partition.items():
        positions = sorted(record.queue_position for record in active)
        assert positions == list(range(1, len(active) + 1)), key

        ordered = sorted(active, key=lambda record: creation_order[record.id])
        assert [record.queue_position for record in ordered] == positions, key


@pytest.mark.parametrize("seed", range(8))
def test_random_operation_sequences_keep_queue_consistent(store, catalog, make_draft, seed) -> None:
    rng = random.Random(seed)
    service = AppointmentService(store, catalog=catalog)
    creation_order = {}

    async def run():
        for step in range(120):
            records = await store.load_all()
            if not records or rng.random() < 0.45:
                provider_id, service_id, date = rng.choice(PARTITIONS)
                booked = await service.create_appointment(
                    make_draft(provider_id=provider_id, service_id=service_id, date=date)
                )
                creation_order[booked.id] = step
            else:
                target = rng.choice(records)
                requested = rng.choice(STATUSES)
                before = {record.id: record for record in records}
                if requested in ALLOWED_TRANSITIONS.get(target.status, frozenset()):
                    await service.set_status(target.id, requested)
                    after = {record.id: record for record in await store.load_all()}
                    if requested in TERMINAL_STATUSES:
                        vacated = target.queue_position
                        for record_id, old in before.items():
                            if record_id == target.id or not is_active(old):
                                continue
                            if PartitionKey.of(old) != PartitionKey.of(target):
                                assert after[record_id].queue_position == old.queue_position
                            elif old.queue_position > vacated:
                                assert after[record_id].queue_position == old.queue_position - 1
                            else:
                                assert after[record_id].queue_position == old.queue_position
                else:
                    with pytest.raises(InvalidTransitionError):
                        await service.set_status(target.id, requested)
                    assert await store.load_all() == records

            _check_invariants(await store.load_all(), creation_order)

    asyncio.run(run())
