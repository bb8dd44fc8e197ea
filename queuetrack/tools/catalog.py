from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from queuetrack.dependencies.services import get_catalog_service
from queuetrack.schemas.catalog import (
    ProviderSummary,
    ServiceListResponse,
    ServiceSummary,
    TimeSlotListResponse,
)
from queuetrack.services import CatalogService
from queuetrack.services.exceptions import ServiceError
from queuetrack.tools.errors import to_http_exception

router = APIRouter()


@router.get("/services", response_model=ServiceListResponse)
async def list_services(service: CatalogService = Depends(get_catalog_service)):
    return await service.list_services()


@router.get("/services/{service_id}", response_model=ServiceSummary)
async def get_service(
    service_id: str,
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.get_service(service_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/services/{service_id}/providers", response_model=List[ProviderSummary])
async def providers_for_service(
    service_id: str,
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.providers_for_service(service_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/providers", response_model=List[ProviderSummary])
async def list_providers(service: CatalogService = Depends(get_catalog_service)):
    return await service.list_providers()


@router.get("/providers/{provider_id}/slots", response_model=TimeSlotListResponse)
async def provider_time_slots(
    provider_id: str,
    start_date: Optional[date] = Query(None, description="First day (YYYY-MM-DD); defaults to today in UTC"),
    days: Optional[int] = Query(None, ge=1, le=60),
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.time_slots(provider_id, start_date=start_date, days=days)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
