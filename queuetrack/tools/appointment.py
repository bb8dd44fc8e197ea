from fastapi import APIRouter, Depends

from queuetrack.dependencies.services import get_appointment_service
from queuetrack.schemas.appointment import (
    Appointment,
    AppointmentCreateRequest,
    AppointmentListResponse,
    StatusUpdateRequest,
)
from queuetrack.schemas.catalog import ProviderStats
from queuetrack.schemas.queue import QueueInfo
from queuetrack.services import AppointmentService
from queuetrack.services.exceptions import ServiceError
from queuetrack.tools.errors import to_http_exception

router = APIRouter()


@router.post("/appointments", response_model=Appointment, status_code=201)
async def create_appointment(
    req: AppointmentCreateRequest,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.create_appointment(req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/appointments/{appointment_id}", response_model=Appointment)
async def get_appointment(
    appointment_id: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.get_appointment(appointment_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/appointments/{appointment_id}/status", response_model=Appointment)
async def set_appointment_status(
    appointment_id: str,
    req: StatusUpdateRequest,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.set_status(appointment_id, req.status)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/appointments/{appointment_id}/queue", response_model=QueueInfo)
async def get_queue_info(
    appointment_id: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.get_queue_info(appointment_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/customers/{customer_id}/appointments", response_model=AppointmentListResponse)
async def list_customer_appointments(
    customer_id: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.list_by_customer(customer_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/providers/{provider_id}/appointments", response_model=AppointmentListResponse)
async def list_provider_appointments(
    provider_id: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.list_by_provider(provider_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/providers/{provider_id}/stats", response_model=ProviderStats)
async def provider_stats(
    provider_id: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.provider_stats(provider_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
