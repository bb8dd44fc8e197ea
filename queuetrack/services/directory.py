from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timezone
from typing import DefaultDict, List, Optional, Set

from queuetrack.schemas.catalog import (
    ProviderSummary,
    ServiceListResponse,
    ServiceSummary,
    TimeSlotListResponse,
)
from queuetrack.services.catalog import CatalogRepository, TimeSlotGenerator, get_catalog
from queuetrack.services.partition import is_active
from queuetrack.services.store import AppointmentStore, get_store

logger = logging.getLogger(__name__)


class CatalogService:
    """Service responsible for catalog queries and bookable time slots."""

    def __init__(
        self,
        store: AppointmentStore | None = None,
        *,
        catalog: CatalogRepository | None = None,
        slot_generator: TimeSlotGenerator | None = None,
        default_days: int = 7,
    ) -> None:
        self._store = store or get_store()
        self._catalog = catalog or get_catalog()
        self._slot_generator = slot_generator or TimeSlotGenerator()
        self._default_days = default_days

    async def list_services(self) -> ServiceListResponse:
        items = [record.summary() for record in self._catalog.iter_services()]
        return ServiceListResponse(total=len(items), items=items)

    async def get_service(self, service_id: str) -> ServiceSummary:
        return self._catalog.get_service(service_id).summary()

    async def list_providers(self) -> List[ProviderSummary]:
        return [record.summary() for record in self._catalog.iter_providers()]

    async def providers_for_service(self, service_id: str) -> List[ProviderSummary]:
        return [record.summary() for record in self._catalog.providers_for_service(service_id)]

    async def time_slots(
        self,
        provider_id: str,
        *,
        start_date: Optional[date] = None,
        days: Optional[int] = None,
    ) -> TimeSlotListResponse:
        self._catalog.get_provider(provider_id)
        first_day = start_date or datetime.now(timezone.utc).date()
        span = days or self._default_days
        logger.info(
            "Generating %d days of slots for provider %s from %s",
            span,
            provider_id,
            first_day.isoformat(),
        )

        booked: DefaultDict[str, Set[str]] = defaultdict(set)
        for record in await self._store.load_all():
            if record.provider_id == provider_id and is_active(record):
                booked[record.date].add(record.start_time)

        slots = self._slot_generator.generate(provider_id, first_day, span, booked=booked)
        return TimeSlotListResponse(
            provider_id=provider_id,
            start_date=first_day.isoformat(),
            days=span,
            items=slots,
        )
