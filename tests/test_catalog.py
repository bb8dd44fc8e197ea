import asyncio
from datetime import date

import pytest

from queuetrack.services.appointment import AppointmentService
from queuetrack.services.catalog import TimeSlotGenerator
from queuetrack.services.directory import CatalogService
from queuetrack.services.exceptions import NotFoundError


def test_seeded_catalog_lists_services_and_providers(catalog) -> None:
    services = {record.service_id: record for record in catalog.iter_services()}

    assert set(services) == {"s1", "s2", "s3", "s4"}
    assert services["s1"].name == "Medical Consultation"
    assert [provider.provider_id for provider in catalog.providers_for_service("s3")] == ["p4", "p5"]
    assert {provider.average_wait_time for provider in catalog.iter_providers()} == {
        10,
        15,
        20,
        25,
        30,
        45,
    }


def test_average_wait_time_lookup(catalog) -> None:
    assert catalog.average_wait_time("p3") == 25

    with pytest.raises(NotFoundError):
        catalog.average_wait_time("p404")


def test_provider_must_offer_service(catalog) -> None:
    assert catalog.find_provider_for_service("s1", "p2").name == "Dr. Michael Chen"

    with pytest.raises(NotFoundError):
        catalog.find_provider_for_service("s1", "p6")
    with pytest.raises(NotFoundError):
        catalog.get_service("s9")


def test_booking_requires_matching_service_and_provider(store, catalog, make_draft) -> None:
    service = AppointmentService(store, catalog=catalog)

    with pytest.raises(NotFoundError):
        asyncio.run(service.create_appointment(make_draft(provider_id="p6", service_id="s1")))

    assert asyncio.run(store.load_all()) == []


def test_booking_copies_display_names(store, catalog, make_draft) -> None:
    service = AppointmentService(store, catalog=catalog)

    booked = asyncio.run(service.create_appointment(make_draft("dana", provider_id="p3", service_id="s2")))

    assert booked.service_name == "Dental Care"
    assert booked.provider_name == "Dr. Sarah Johnson"
    assert booked.customer_name == "DANA"


def test_slot_generator_covers_working_day() -> None:
    generator = TimeSlotGenerator()

    slots = generator.generate("p1", date(2025, 9, 6), 2)

    assert len(slots) == 32
    assert slots[0].start_time == "09:00"
    assert slots[0].end_time == "09:30"
    assert slots[15].start_time == "16:30"
    assert slots[15].end_time == "17:00"
    assert {slot.date for slot in slots} == {"2025-09-06", "2025-09-07"}
    assert len({slot.slot_id for slot in slots}) == 32


def test_slot_availability_is_stable_between_polls() -> None:
    generator = TimeSlotGenerator()

    first = generator.generate("p2", date(2025, 9, 6), 3)
    second = generator.generate("p2", date(2025, 9, 6), 3)

    assert [slot.is_available for slot in first] == [slot.is_available for slot in second]


def test_slot_ratio_extremes() -> None:
    always = TimeSlotGenerator(unavailable_ratio=0.0).generate("p1", date(2025, 9, 6), 1)
    never = TimeSlotGenerator(unavailable_ratio=1.0).generate("p1", date(2025, 9, 6), 1)

    assert all(slot.is_available for slot in always)
    assert not any(slot.is_available for slot in never)


def test_slot_generator_rejects_inverted_day() -> None:
    with pytest.raises(ValueError):
        TimeSlotGenerator(day_start_hour=17, day_end_hour=9)


def test_booked_start_times_are_unavailable(store, catalog, make_draft) -> None:
    bookings = AppointmentService(store, catalog=catalog)
    directory = CatalogService(
        store,
        catalog=catalog,
        slot_generator=TimeSlotGenerator(unavailable_ratio=0.0),
    )
    booked = asyncio.run(
        bookings.create_appointment(make_draft(start_time="10:00", end_time="10:30"))
    )
    cancelled = asyncio.run(
        bookings.create_appointment(make_draft(start_time="11:00", end_time="11:30"))
    )
    asyncio.run(bookings.set_status(cancelled.id, "cancelled"))

    response = asyncio.run(
        directory.time_slots("p1", start_date=date.fromisoformat(booked.date), days=1)
    )

    by_start = {slot.start_time: slot for slot in response.items}
    assert by_start["10:00"].is_available is False
    assert by_start["11:00"].is_available is True
    assert by_start["09:00"].is_available is True
    assert response.days == 1


def test_time_slots_for_unknown_provider(store, catalog) -> None:
    directory = CatalogService(store, catalog=catalog)

    with pytest.raises(NotFoundError):
        asyncio.run(directory.time_slots("p404"))


def test_provider_stats_counts_by_status(store, catalog, make_draft) -> None:
    service = AppointmentService(store, catalog=catalog)
    booked = [asyncio.run(service.create_appointment(make_draft())) for _ in range(4)]
    asyncio.run(service.set_status(booked[0].id, "in-progress"))
    asyncio.run(service.set_status(booked[0].id, "completed"))
    asyncio.run(service.set_status(booked[1].id, "no-show"))
    asyncio.run(service.set_status(booked[2].id, "cancelled"))

    stats = asyncio.run(service.provider_stats("p1"))

    assert stats.total_appointments == 4
    assert stats.completed_appointments == 1
    assert stats.no_shows == 1
    assert stats.cancelled_appointments == 1
    assert stats.active_appointments == 1
    assert stats.average_wait_time == 15
