from __future__ import annotations

import logging
from typing import List

from queuetrack.schemas.appointment import (
    Appointment,
    AppointmentCreateRequest,
    AppointmentListResponse,
    AppointmentStatus,
)
from queuetrack.schemas.catalog import ProviderStats
from queuetrack.schemas.queue import QueueInfo
from queuetrack.services.catalog import CatalogRepository, get_catalog
from queuetrack.services.exceptions import NotFoundError
from queuetrack.services.partition import is_active
from queuetrack.services.projector import QueueInfoProjector
from queuetrack.services.queue_engine import QueueAssignmentEngine
from queuetrack.services.store import AppointmentStore, get_store
from queuetrack.services.transitions import StatusTransitionValidator

logger = logging.getLogger(__name__)


def _listing_order(appointment: Appointment) -> tuple:
    return (
        appointment.date,
        appointment.queue_position or 0,
        appointment.start_time,
    )


class AppointmentService:
    def __init__(
        self,
        store: AppointmentStore | None = None,
        *,
        catalog: CatalogRepository | None = None,
    ) -> None:
        self._store = store or get_store()
        self._catalog = catalog or get_catalog()
        self._engine = QueueAssignmentEngine(self._store, self._catalog)
        self._projector = QueueInfoProjector(self._store, self._catalog)
        self._transitions = StatusTransitionValidator(self._store, self._engine)

    @property
    def engine(self) -> QueueAssignmentEngine:
        return self._engine

    async def create_appointment(self, request: AppointmentCreateRequest) -> Appointment:
        logger.info(
            "Booking appointment for customer %s with provider %s on %s",
            request.customer_id,
            request.provider_id,
            request.date,
        )
        service = self._catalog.get_service(request.service_id)
        provider = self._catalog.find_provider_for_service(request.service_id, request.provider_id)
        return await self._engine.assign(
            request,
            service_name=service.name,
            provider_name=provider.name,
        )

    async def get_appointment(self, appointment_id: str) -> Appointment:
        appointment = await self._store.get(appointment_id)
        if appointment is None:
            raise NotFoundError(f"Appointment '{appointment_id}' not found")
        return appointment

    async def set_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment:
        logger.info("Setting status of %s to %s", appointment_id, status)
        return await self._transitions.transition(appointment_id, status)

    async def get_queue_info(self, appointment_id: str) -> QueueInfo:
        return await self._projector.project(appointment_id)

    async def list_by_customer(self, customer_id: str) -> AppointmentListResponse:
        items = [
            record for record in await self._store.load_all()
            if record.customer_id == customer_id
        ]
        items.sort(key=_listing_order)
        return AppointmentListResponse(total=len(items), items=items)

    async def list_by_provider(self, provider_id: str) -> AppointmentListResponse:
        items = [
            record for record in await self._store.load_all()
            if record.provider_id == provider_id
        ]
        items.sort(key=_listing_order)
        return AppointmentListResponse(total=len(items), items=items)

    async def provider_stats(self, provider_id: str) -> ProviderStats:
        provider = self._catalog.get_provider(provider_id)
        records: List[Appointment] = [
            record for record in await self._store.load_all()
            if record.provider_id == provider_id
        ]
        return ProviderStats(
            provider_id=provider_id,
            total_appointments=len(records),
            completed_appointments=sum(1 for r in records if r.status == "completed"),
            no_shows=sum(1 for r in records if r.status == "no-show"),
            cancelled_appointments=sum(1 for r in records if r.status == "cancelled"),
            active_appointments=sum(1 for r in records if is_active(r)),
            average_wait_time=provider.average_wait_time,
        )
