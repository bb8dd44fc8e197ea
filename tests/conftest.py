import os
import sys
from typing import Callable

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from queuetrack.schemas.appointment import AppointmentCreateRequest
from queuetrack.services.catalog import CatalogRepository
from queuetrack.services.store import InMemoryAppointmentStore, reset_store

QUEUE_DATE = "2025-09-06"


@pytest.fixture(autouse=True)
def _reset_store() -> None:
    reset_store()
    yield
    reset_store()


@pytest.fixture
def store() -> InMemoryAppointmentStore:
    return InMemoryAppointmentStore()


@pytest.fixture
def catalog() -> CatalogRepository:
    return CatalogRepository()


@pytest.fixture
def make_draft() -> Callable[..., AppointmentCreateRequest]:
    counter = {"value": 0}

    def _make(
        customer_id: str | None = None,
        *,
        provider_id: str = "p1",
        service_id: str = "s1",
        date: str = QUEUE_DATE,
        start_time: str = "09:00",
        end_time: str = "09:30",
    ) -> AppointmentCreateRequest:
        counter["value"] += 1
        customer = customer_id or f"c{counter['value']}"
        return AppointmentCreateRequest(
            service_id=service_id,
            provider_id=provider_id,
            customer_id=customer,
            customer_name=customer.upper(),
            date=date,
            start_time=start_time,
            end_time=end_time,
        )

    return _make
