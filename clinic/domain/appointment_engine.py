# clinic/domain/appointment_engine.py
"""
Appointment lifecycle.

    Requested -> Scheduled   doctor approval
    Requested -> Canceled    any role
    Scheduled -> Completed   consultation (see consultation.py)
    Scheduled -> Canceled    any role

Rescheduling changes the date only. When a patient moves a Scheduled
appointment it drops back to Requested so the doctor confirms the new time;
doctor and administrator moves keep the status.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from common import ClinicConfig, get_app_logger, get_config
from clinic.db.models import Appointment, AppointmentStatus, Role
from clinic.db.repositories import Repository
from .errors import InvalidRequestError, InvalidTransitionError
from .schedule_engine import ScheduleEngine
from .transitions import APPOINTMENT_TRANSITIONS, ensure_transition, is_terminal

logger = get_app_logger(__name__)


def _now_like(value: datetime) -> datetime:
    # Compare naive with naive and aware with aware
    return datetime.now(tz=value.tzinfo)


class AppointmentEngine:
    def __init__(self, db: AsyncSession, config: Optional[ClinicConfig] = None):
        self.db = db
        self.config = config or get_config().clinic
        self.appointments = Repository(db, Appointment)
        self.schedule_engine = ScheduleEngine(db, self.config)

    async def _load(
        self,
        appointment_id: int,
        *,
        doctor_id: Optional[int] = None,
        patient_id: Optional[int] = None,
    ) -> Appointment:
        scope = []
        if doctor_id is not None:
            scope.append(Appointment.doctor_id == doctor_id)
        if patient_id is not None:
            scope.append(Appointment.patient_id == patient_id)
        return await self.appointments.get_or_raise(
            appointment_id, *scope, for_update=True
        )

    async def request(
        self,
        patient_id: int,
        doctor_id: int,
        appointment_date: datetime,
        symptoms: Optional[str] = None,
    ) -> Appointment:
        """
        Book a new appointment in Requested status.

        Raises:
            ScheduleConflictError: If no Scheduled window covers the date
        """
        await self.schedule_engine.ensure_covered(doctor_id, appointment_date)

        appointment = await self.appointments.add(
            Appointment(
                patient_id=patient_id,
                doctor_id=doctor_id,
                appointment_date=appointment_date,
                symptoms=symptoms,
                status=AppointmentStatus.REQUESTED,
            )
        )
        logger.info(
            "Appointment requested",
            appointment_id=appointment.appointment_id,
            patient_id=patient_id,
            doctor_id=doctor_id,
        )
        return appointment

    async def approve(self, doctor_id: int, appointment_id: int) -> Appointment:
        """
        Raises:
            NotFoundError: Unknown appointment or another doctor's
            InvalidTransitionError: Appointment is not Requested
        """
        appointment = await self._load(appointment_id, doctor_id=doctor_id)
        ensure_transition(
            "Appointment",
            appointment.status,
            AppointmentStatus.SCHEDULED,
            APPOINTMENT_TRANSITIONS,
        )
        appointment.status = AppointmentStatus.SCHEDULED
        await self.db.flush()
        logger.info("Appointment approved", appointment_id=appointment_id)
        return appointment

    async def cancel(
        self,
        appointment_id: int,
        *,
        doctor_id: Optional[int] = None,
        patient_id: Optional[int] = None,
    ) -> Appointment:
        """
        Cancel from Requested or Scheduled. Cancelling twice is an error.
        """
        appointment = await self._load(
            appointment_id, doctor_id=doctor_id, patient_id=patient_id
        )
        ensure_transition(
            "Appointment",
            appointment.status,
            AppointmentStatus.CANCELED,
            APPOINTMENT_TRANSITIONS,
        )
        appointment.status = AppointmentStatus.CANCELED
        await self.db.flush()
        logger.info("Appointment canceled", appointment_id=appointment_id)
        return appointment

    async def reschedule(
        self,
        actor: Role,
        appointment_id: int,
        new_date: datetime,
        *,
        doctor_id: Optional[int] = None,
        patient_id: Optional[int] = None,
    ) -> Appointment:
        """
        Move an open appointment to ``new_date``.

        Raises:
            NotFoundError: Unknown appointment or outside the caller's scope
            InvalidTransitionError: Appointment is Completed or Canceled
            InvalidRequestError: ``new_date`` is not in the future
            ScheduleConflictError: No Scheduled window covers ``new_date``
        """
        appointment = await self._load(
            appointment_id, doctor_id=doctor_id, patient_id=patient_id
        )
        if is_terminal(appointment.status, APPOINTMENT_TRANSITIONS):
            raise InvalidTransitionError(
                f"Cannot reschedule a {appointment.status.value.lower()} appointment"
            )
        if new_date <= _now_like(new_date):
            raise InvalidRequestError("New appointment date must be in the future")

        await self.schedule_engine.ensure_covered(appointment.doctor_id, new_date)

        appointment.appointment_date = new_date
        if actor is Role.PATIENT:
            appointment.status = AppointmentStatus.REQUESTED
        await self.db.flush()

        logger.info(
            "Appointment rescheduled",
            appointment_id=appointment_id,
            actor=actor.value,
            status=appointment.status.value,
        )
        return appointment

    async def list_for_patient(self, patient_id: int) -> list[Appointment]:
        return await self.appointments.find_all(
            Appointment.patient_id == patient_id,
            order_by=(Appointment.appointment_date.desc(),),
        )

    async def list_for_doctor(
        self, doctor_id: int, status: Optional[AppointmentStatus] = None
    ) -> list[Appointment]:
        where = [Appointment.doctor_id == doctor_id]
        if status is not None:
            where.append(Appointment.status == status)
        return await self.appointments.find_all(
            *where, order_by=(Appointment.appointment_date,)
        )

    async def cancel_open_for(
        self,
        *,
        doctor_id: Optional[int] = None,
        patient_id: Optional[int] = None,
    ) -> int:
        """Cancel every Requested or Scheduled appointment of a removed profile."""
        where = [
            Appointment.status.in_(
                (AppointmentStatus.REQUESTED, AppointmentStatus.SCHEDULED)
            )
        ]
        if doctor_id is not None:
            where.append(Appointment.doctor_id == doctor_id)
        if patient_id is not None:
            where.append(Appointment.patient_id == patient_id)
        open_appointments = await self.appointments.find_all(*where)
        for appointment in open_appointments:
            appointment.status = AppointmentStatus.CANCELED
        await self.db.flush()
        return len(open_appointments)


__all__ = ["AppointmentEngine"]
