from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from clinic.db.schemas import AppointmentReschedule, ScheduleCreate


class TestScheduleWindow:
    def test_naive_bound_is_read_as_utc(self):
        window = ScheduleCreate(
            start_date="2099-01-01T09:00:00", end_date="2099-01-01T17:00:00Z"
        )

        assert window.start_date == datetime(2099, 1, 1, 9, tzinfo=timezone.utc)
        assert window.end_date.tzinfo is not None

    def test_offset_is_kept(self):
        window = ScheduleCreate(
            start_date="2099-01-01T09:00:00+02:00", end_date="2099-01-01T08:00:00"
        )

        assert window.start_date.utcoffset().total_seconds() == 7200

    def test_mixed_inverted_window_is_validation_error(self):
        with pytest.raises(ValidationError):
            ScheduleCreate(
                start_date="2099-01-01T17:00:00Z", end_date="2099-01-01T09:00:00"
            )


class TestAppointmentDates:
    def test_reschedule_date_becomes_aware(self):
        moved = AppointmentReschedule(new_appointment_date="2099-06-01T11:00:00")

        assert moved.new_appointment_date.tzinfo is timezone.utc
