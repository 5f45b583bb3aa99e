from datetime import datetime, timezone

import pytest

from clinic.db.models import ScheduleStatus
from clinic.domain import (
    InvalidRequestError,
    InvalidTransitionError,
    NotFoundError,
    ScheduleConflictError,
)
from clinic.domain.schedule_engine import ScheduleEngine
from tests.factories import make_doctor

START = datetime(2024, 6, 1, 9, 0)
END = datetime(2024, 6, 1, 17, 0)


class TestScheduleEngine:
    @pytest.mark.asyncio
    async def test_create_opens_scheduled_window(self, db_session, clinic_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, clinic_config)

        schedule = await engine.create(doctor.doctor_id, START, END)

        assert schedule.schedule_id is not None
        assert schedule.status is ScheduleStatus.SCHEDULED

    @pytest.mark.asyncio
    async def test_create_rejects_inverted_window(self, db_session, clinic_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, clinic_config)

        with pytest.raises(InvalidRequestError):
            await engine.create(doctor.doctor_id, END, START)

    @pytest.mark.asyncio
    async def test_create_accepts_naive_and_aware_bounds(
        self, db_session, clinic_config
    ):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, clinic_config)

        schedule = await engine.create(
            doctor.doctor_id, START, END.replace(tzinfo=timezone.utc)
        )
        assert schedule.status is ScheduleStatus.SCHEDULED

        with pytest.raises(InvalidRequestError):
            await engine.create(
                doctor.doctor_id, END, START.replace(tzinfo=timezone.utc)
            )

    @pytest.mark.asyncio
    async def test_window_bounds_are_inclusive(self, db_session, clinic_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, clinic_config)
        await engine.create(doctor.doctor_id, START, END)

        assert await engine.find_covering_window(doctor.doctor_id, START) is not None
        assert await engine.find_covering_window(doctor.doctor_id, END) is not None
        assert (
            await engine.find_covering_window(
                doctor.doctor_id, datetime(2024, 6, 1, 17, 1)
            )
            is None
        )

    @pytest.mark.asyncio
    async def test_cancelled_window_does_not_cover(self, db_session, clinic_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, clinic_config)
        schedule = await engine.create(doctor.doctor_id, START, END)
        await engine.cancel(schedule.schedule_id)

        with pytest.raises(ScheduleConflictError):
            await engine.ensure_covered(doctor.doctor_id, datetime(2024, 6, 1, 10, 0))

    @pytest.mark.asyncio
    async def test_cancel_completed_window_fails(self, db_session, clinic_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, clinic_config)
        schedule = await engine.create(doctor.doctor_id, START, END)
        await engine.complete(schedule.schedule_id)

        with pytest.raises(InvalidTransitionError):
            await engine.cancel(schedule.schedule_id)

    @pytest.mark.asyncio
    async def test_complete_cancelled_window_fails(self, db_session, clinic_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, clinic_config)
        schedule = await engine.create(doctor.doctor_id, START, END)
        await engine.cancel(schedule.schedule_id)

        with pytest.raises(InvalidTransitionError):
            await engine.complete(schedule.schedule_id)

    @pytest.mark.asyncio
    async def test_doctor_scope_hides_other_doctors_windows(
        self, db_session, clinic_config
    ):
        owner = await make_doctor(db_session)
        other = await make_doctor(db_session, "Dr. Ada Grey", email="ada@clinic.org")
        engine = ScheduleEngine(db_session, clinic_config)
        schedule = await engine.create(owner.doctor_id, START, END)

        with pytest.raises(NotFoundError):
            await engine.cancel(schedule.schedule_id, doctor_id=other.doctor_id)

    @pytest.mark.asyncio
    async def test_update_moves_window_and_can_close_it(
        self, db_session, clinic_config
    ):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, clinic_config)
        schedule = await engine.create(doctor.doctor_id, START, END)

        new_start = datetime(2024, 6, 2, 9, 0)
        new_end = datetime(2024, 6, 2, 12, 0)
        updated = await engine.update(
            schedule.schedule_id,
            new_start,
            new_end,
            ScheduleStatus.COMPLETED,
            doctor_id=doctor.doctor_id,
        )

        assert updated.start_date == new_start
        assert updated.end_date == new_end
        assert updated.status is ScheduleStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_update_closed_window_fails(self, db_session, clinic_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, clinic_config)
        schedule = await engine.create(doctor.doctor_id, START, END)
        await engine.cancel(schedule.schedule_id)

        with pytest.raises(InvalidTransitionError):
            await engine.update(schedule.schedule_id, START, END)


class TestOverlapRule:
    @pytest.mark.asyncio
    async def test_overlap_allowed_by_default(self, db_session, clinic_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, clinic_config)
        await engine.create(doctor.doctor_id, START, END)

        second = await engine.create(
            doctor.doctor_id, datetime(2024, 6, 1, 16, 0), datetime(2024, 6, 1, 20, 0)
        )

        assert second.schedule_id is not None

    @pytest.mark.asyncio
    async def test_overlap_rejected_when_enabled(self, db_session, strict_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, strict_config)
        await engine.create(doctor.doctor_id, START, END)

        with pytest.raises(ScheduleConflictError):
            await engine.create(
                doctor.doctor_id,
                datetime(2024, 6, 1, 16, 0),
                datetime(2024, 6, 1, 20, 0),
            )

    @pytest.mark.asyncio
    async def test_touching_windows_count_as_overlap(self, db_session, strict_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, strict_config)
        await engine.create(doctor.doctor_id, START, END)

        with pytest.raises(ScheduleConflictError):
            await engine.create(doctor.doctor_id, END, datetime(2024, 6, 1, 20, 0))

    @pytest.mark.asyncio
    async def test_window_may_be_updated_in_place(self, db_session, strict_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, strict_config)
        schedule = await engine.create(doctor.doctor_id, START, END)

        updated = await engine.update(
            schedule.schedule_id, START, datetime(2024, 6, 1, 18, 0)
        )

        assert updated.end_date == datetime(2024, 6, 1, 18, 0)

    @pytest.mark.asyncio
    async def test_cancelled_windows_do_not_block(self, db_session, strict_config):
        doctor = await make_doctor(db_session)
        engine = ScheduleEngine(db_session, strict_config)
        first = await engine.create(doctor.doctor_id, START, END)
        await engine.cancel(first.schedule_id)

        second = await engine.create(doctor.doctor_id, START, END)

        assert second.schedule_id != first.schedule_id
