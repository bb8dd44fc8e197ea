from __future__ import annotations

import logging
import random
from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Set

from queuetrack.schemas.catalog import ProviderSummary, ServiceSummary, TimeSlot
from queuetrack.services.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class ProviderRecord:
    def __init__(
        self,
        *,
        provider_id: str,
        name: str,
        specialization: str,
        average_wait_time: int,
    ) -> None:
        self.provider_id = provider_id
        self.name = name
        self.specialization = specialization
        self.average_wait_time = int(average_wait_time)

    def summary(self) -> ProviderSummary:
        return ProviderSummary(
            provider_id=self.provider_id,
            name=self.name,
            specialization=self.specialization,
            average_wait_time=self.average_wait_time,
        )


class ServiceRecord:
    def __init__(
        self,
        *,
        service_id: str,
        name: str,
        description: str,
        icon: str,
        providers: Iterable[ProviderRecord],
    ) -> None:
        self.service_id = service_id
        self.name = name
        self.description = description
        self.icon = icon
        self.providers = list(providers)

    def summary(self) -> ServiceSummary:
        return ServiceSummary(
            service_id=self.service_id,
            name=self.name,
            description=self.description,
            icon=self.icon,
            providers=[provider.summary() for provider in self.providers],
        )


class CatalogRepository:
    """Services offered and the providers who deliver them."""

    def __init__(self, services: Iterable[ServiceRecord] | None = None) -> None:
        self._services: Dict[str, ServiceRecord] = {}
        self._providers: Dict[str, ProviderRecord] = {}
        if services is None:
            self._seed_services()
        else:
            for record in services:
                self.add_service(record)

    def _seed_services(self) -> None:
        self.add_service(
            ServiceRecord(
                service_id="s1",
                name="Medical Consultation",
                description="General check-up and consultation with a doctor",
                icon="🩺",
                providers=[
                    ProviderRecord(
                        provider_id="p1",
                        name="Dr. Jane Smith",
                        specialization="General Medicine",
                        average_wait_time=15,
                    ),
                    ProviderRecord(
                        provider_id="p2",
                        name="Dr. Michael Chen",
                        specialization="Family Medicine",
                        average_wait_time=20,
                    ),
                ],
            )
        )
        self.add_service(
            ServiceRecord(
                service_id="s2",
                name="Dental Care",
                description="Dental checkup, cleaning, and consultation",
                icon="🦷",
                providers=[
                    ProviderRecord(
                        provider_id="p3",
                        name="Dr. Sarah Johnson",
                        specialization="General Dentistry",
                        average_wait_time=25,
                    ),
                ],
            )
        )
        self.add_service(
            ServiceRecord(
                service_id="s3",
                name="Hair Salon",
                description="Haircuts, styling, and treatments",
                icon="✂️",
                providers=[
                    ProviderRecord(
                        provider_id="p4",
                        name="Alex Rodriguez",
                        specialization="Hair Stylist",
                        average_wait_time=30,
                    ),
                    ProviderRecord(
                        provider_id="p5",
                        name="Jamie Lee",
                        specialization="Color Specialist",
                        average_wait_time=45,
                    ),
                ],
            )
        )
        self.add_service(
            ServiceRecord(
                service_id="s4",
                name="Banking Services",
                description="Account services and financial consultation",
                icon="🏦",
                providers=[
                    ProviderRecord(
                        provider_id="p6",
                        name="Taylor Morgan",
                        specialization="Personal Banking",
                        average_wait_time=10,
                    ),
                ],
            )
        )

    def add_service(self, record: ServiceRecord) -> None:
        self._services[record.service_id] = record
        for provider in record.providers:
            self._providers[provider.provider_id] = provider

    def iter_services(self) -> Iterable[ServiceRecord]:
        return self._services.values()

    def iter_providers(self) -> Iterable[ProviderRecord]:
        return self._providers.values()

    def get_service(self, service_id: str) -> ServiceRecord:
        record = self._services.get(service_id)
        if record is None:
            raise NotFoundError(f"Service '{service_id}' not found")
        return record

    def get_provider(self, provider_id: str) -> ProviderRecord:
        record = self._providers.get(provider_id)
        if record is None:
            raise NotFoundError(f"Provider '{provider_id}' not found")
        return record

    def providers_for_service(self, service_id: str) -> List[ProviderRecord]:
        return list(self.get_service(service_id).providers)

    def find_provider_for_service(self, service_id: str, provider_id: str) -> ProviderRecord:
        """Return the provider only when it delivers the given service."""
        service = self.get_service(service_id)
        for provider in service.providers:
            if provider.provider_id == provider_id:
                return provider
        raise NotFoundError(
            f"Provider '{provider_id}' does not offer service '{service_id}'"
        )

    def average_wait_time(self, provider_id: str) -> int:
        return self.get_provider(provider_id).average_wait_time


class TimeSlotGenerator:
    """Candidate booking slots for a provider over a run of days.

    Availability is pseudo-random but seeded per provider and date, so a
    client polling the same range sees the same answer. Start times already
    held by an active appointment are never offered.
    """

    def __init__(
        self,
        *,
        day_start_hour: int = 9,
        day_end_hour: int = 17,
        interval_minutes: int = 30,
        unavailable_ratio: float = 0.3,
    ) -> None:
        if day_end_hour <= day_start_hour:
            raise ValueError("day_end_hour must be after day_start_hour")
        self._day_start_hour = day_start_hour
        self._day_end_hour = day_end_hour
        self._interval = timedelta(minutes=interval_minutes)
        self._unavailable_ratio = unavailable_ratio

    def generate(
        self,
        provider_id: str,
        start_date: date,
        days: int,
        *,
        booked: Optional[Dict[str, Set[str]]] = None,
    ) -> List[TimeSlot]:
        booked = booked or {}
        slots: List[TimeSlot] = []
        for offset in range(days):
            day = start_date + timedelta(days=offset)
            day_iso = day.isoformat()
            taken = booked.get(day_iso, set())
            rng = random.Random(f"{provider_id}:{day_iso}")

            current = datetime.combine(day, datetime.min.time()).replace(hour=self._day_start_hour)
            day_end = datetime.combine(day, datetime.min.time()) + timedelta(hours=self._day_end_hour)
            while current + self._interval <= day_end:
                start_time = current.strftime("%H:%M")
                end_time = (current + self._interval).strftime("%H:%M")
                is_available = rng.random() >= self._unavailable_ratio and start_time not in taken
                slots.append(
                    TimeSlot(
                        slot_id=f"{provider_id}-{day_iso}-{start_time.replace(':', '')}",
                        provider_id=provider_id,
                        date=day_iso,
                        start_time=start_time,
                        end_time=end_time,
                        is_available=is_available,
                    )
                )
                current += self._interval
        logger.debug("Generated %d slots for provider %s", len(slots), provider_id)
        return slots


@lru_cache(maxsize=1)
def get_catalog() -> CatalogRepository:
    return CatalogRepository()
