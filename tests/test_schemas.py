import asyncio
import sys

import pytest
from pydantic import ValidationError

from queuetrack.schemas.appointment import AppointmentCreateRequest
from queuetrack.services.appointment import AppointmentService


def _request(**overrides) -> AppointmentCreateRequest:
    fields = {
        "service_id": "s1",
        "provider_id": "p1",
        "customer_id": "c1",
        "date": "2025-09-06",
        "start_time": "09:00",
        "end_time": "09:30",
    }
    fields.update(overrides)
    return AppointmentCreateRequest(**fields)


@pytest.mark.parametrize("spelling", ["2025-09-06", "20250906", "2025-W36-6"])
def test_date_spellings_collapse_to_one_day(spelling) -> None:
    # Older interpreters only parse the extended form; whatever is accepted is normalised.
    try:
        request = _request(date=spelling)
    except ValidationError:
        assert spelling != "2025-09-06"
        return

    assert request.date == "2025-09-06"


def test_times_are_stored_as_hours_and_minutes() -> None:
    request = _request(start_time="09:00:00", end_time="09:30:00.000")

    assert request.start_time == "09:00"
    assert request.end_time == "09:30"


@pytest.mark.parametrize("field, value", [("date", "06/09/2025"), ("start_time", "9am"), ("end_time", "")])
def test_malformed_values_are_rejected(field, value) -> None:
    with pytest.raises(ValidationError):
        _request(**{field: value})


@pytest.mark.skipif(sys.version_info < (3, 11), reason="basic ISO dates parse from 3.11")
def test_basic_and_extended_dates_share_one_queue(store, catalog) -> None:
    service = AppointmentService(store, catalog=catalog)

    first = asyncio.run(service.create_appointment(_request(customer_id="a", date="2025-09-06")))
    second = asyncio.run(service.create_appointment(_request(customer_id="b", date="20250906")))

    assert second.date == first.date
    assert [first.queue_position, second.queue_position] == [1, 2]
