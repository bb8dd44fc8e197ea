from __future__ import annotations

from fastapi import Depends

from queuetrack.config import Settings, get_settings
from queuetrack.services import AppointmentService, CatalogService
from queuetrack.services.catalog import CatalogRepository, TimeSlotGenerator, get_catalog
from queuetrack.services.store import AppointmentStore, get_store


def get_appointment_store() -> AppointmentStore:
    return get_store()


def get_catalog_repository() -> CatalogRepository:
    return get_catalog()


def get_appointment_service(
    store: AppointmentStore = Depends(get_appointment_store),
    catalog: CatalogRepository = Depends(get_catalog_repository),
) -> AppointmentService:
    return AppointmentService(store, catalog=catalog)


def get_catalog_service(
    store: AppointmentStore = Depends(get_appointment_store),
    catalog: CatalogRepository = Depends(get_catalog_repository),
    settings: Settings = Depends(get_settings),
) -> CatalogService:
    generator = TimeSlotGenerator(
        day_start_hour=settings.slot_day_start_hour,
        day_end_hour=settings.slot_day_end_hour,
        interval_minutes=settings.slot_interval_minutes,
        unavailable_ratio=settings.slot_unavailable_ratio,
    )
    return CatalogService(
        store,
        catalog=catalog,
        slot_generator=generator,
        default_days=settings.slot_days,
    )
