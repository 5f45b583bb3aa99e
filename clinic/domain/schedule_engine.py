# clinic/domain/schedule_engine.py
"""
Doctor availability windows.

A window is ``[start_date, end_date]`` with both ends inclusive. Any date
inside a Scheduled window is bookable; there is no slot granularity and no
capacity limit.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession

from common import ClinicConfig, get_app_logger, get_config
from clinic.db.models import DoctorSchedule, ScheduleStatus
from clinic.db.repositories import Repository
from clinic.db.schemas import as_utc
from .errors import InvalidRequestError, InvalidTransitionError, ScheduleConflictError
from .transitions import SCHEDULE_TRANSITIONS, ensure_transition

logger = get_app_logger(__name__)


class ScheduleEngine:
    def __init__(self, db: AsyncSession, config: Optional[ClinicConfig] = None):
        self.db = db
        self.config = config or get_config().clinic
        self.schedules = Repository(db, DoctorSchedule, "Schedule")

    @staticmethod
    def _validate_window(start_date: datetime, end_date: datetime) -> None:
        if as_utc(start_date) >= as_utc(end_date):
            raise InvalidRequestError("Schedule start must be before its end")

    async def find_covering_window(
        self, doctor_id: int, when: datetime
    ) -> Optional[DoctorSchedule]:
        """First Scheduled window of ``doctor_id`` containing ``when``."""
        return await self.schedules.find_one(
            DoctorSchedule.doctor_id == doctor_id,
            DoctorSchedule.status == ScheduleStatus.SCHEDULED,
            DoctorSchedule.start_date <= when,
            DoctorSchedule.end_date >= when,
        )

    async def ensure_covered(self, doctor_id: int, when: datetime) -> DoctorSchedule:
        """
        Raises:
            ScheduleConflictError: If no Scheduled window contains ``when``
        """
        window = await self.find_covering_window(doctor_id, when)
        if window is None:
            raise ScheduleConflictError(
                "The doctor has no available schedule covering the requested date"
            )
        return window

    async def _ensure_no_overlap(
        self,
        doctor_id: int,
        start_date: datetime,
        end_date: datetime,
        exclude_id: Optional[int] = None,
    ) -> None:
        if not self.config.reject_overlapping_schedules:
            return
        where: list[ColumnElement[bool]] = [
            DoctorSchedule.doctor_id == doctor_id,
            DoctorSchedule.status == ScheduleStatus.SCHEDULED,
            DoctorSchedule.start_date <= end_date,
            DoctorSchedule.end_date >= start_date,
        ]
        if exclude_id is not None:
            where.append(DoctorSchedule.schedule_id != exclude_id)
        if await self.schedules.exists(*where):
            raise ScheduleConflictError(
                "Schedule overlaps an existing window for this doctor"
            )

    async def _load(
        self, schedule_id: int, doctor_id: Optional[int]
    ) -> DoctorSchedule:
        scope = []
        if doctor_id is not None:
            scope.append(DoctorSchedule.doctor_id == doctor_id)
        return await self.schedules.get_or_raise(schedule_id, *scope, for_update=True)

    async def create(
        self, doctor_id: int, start_date: datetime, end_date: datetime
    ) -> DoctorSchedule:
        self._validate_window(start_date, end_date)
        await self._ensure_no_overlap(doctor_id, start_date, end_date)

        schedule = await self.schedules.add(
            DoctorSchedule(
                doctor_id=doctor_id,
                start_date=start_date,
                end_date=end_date,
                status=ScheduleStatus.SCHEDULED,
            )
        )
        logger.info(
            "Schedule created",
            schedule_id=schedule.schedule_id,
            doctor_id=doctor_id,
        )
        return schedule

    async def update(
        self,
        schedule_id: int,
        start_date: datetime,
        end_date: datetime,
        status: Optional[ScheduleStatus] = None,
        *,
        doctor_id: Optional[int] = None,
    ) -> DoctorSchedule:
        """
        Move a live window and optionally close it in the same call.

        ``doctor_id`` scopes the lookup to that doctor; administrators pass None.
        """
        schedule = await self._load(schedule_id, doctor_id)
        if schedule.status is not ScheduleStatus.SCHEDULED:
            raise InvalidTransitionError(
                f"Cannot update a {schedule.status.value.lower()} schedule"
            )

        self._validate_window(start_date, end_date)
        if status is not None and status is not schedule.status:
            ensure_transition("Schedule", schedule.status, status, SCHEDULE_TRANSITIONS)
        await self._ensure_no_overlap(
            schedule.doctor_id, start_date, end_date, exclude_id=schedule.schedule_id
        )

        schedule.start_date = start_date
        schedule.end_date = end_date
        if status is not None:
            schedule.status = status
        await self.db.flush()

        logger.info(
            "Schedule updated",
            schedule_id=schedule_id,
            status=schedule.status.value,
        )
        return schedule

    async def _close(
        self, schedule_id: int, target: ScheduleStatus, doctor_id: Optional[int]
    ) -> DoctorSchedule:
        schedule = await self._load(schedule_id, doctor_id)
        ensure_transition("Schedule", schedule.status, target, SCHEDULE_TRANSITIONS)
        schedule.status = target
        await self.db.flush()
        logger.info("Schedule closed", schedule_id=schedule_id, status=target.value)
        return schedule

    async def cancel(
        self, schedule_id: int, *, doctor_id: Optional[int] = None
    ) -> DoctorSchedule:
        return await self._close(schedule_id, ScheduleStatus.CANCELLED, doctor_id)

    async def complete(
        self, schedule_id: int, *, doctor_id: Optional[int] = None
    ) -> DoctorSchedule:
        return await self._close(schedule_id, ScheduleStatus.COMPLETED, doctor_id)

    async def list_for_doctor(
        self, doctor_id: int, status: Optional[ScheduleStatus] = None
    ) -> list[DoctorSchedule]:
        where = [DoctorSchedule.doctor_id == doctor_id]
        if status is not None:
            where.append(DoctorSchedule.status == status)
        return await self.schedules.find_all(
            *where, order_by=(DoctorSchedule.start_date,)
        )


__all__ = ["ScheduleEngine"]
