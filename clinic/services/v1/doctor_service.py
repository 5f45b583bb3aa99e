# clinic/services/v1/doctor_service.py
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from common import ClinicConfig, get_app_logger, get_config
from clinic.db.models import (
    Appointment,
    AppointmentStatus,
    Billing,
    MedicalRecord,
    Medication,
    Role,
    Test,
)
from clinic.db.repositories import Repository
from clinic.db.schemas import (
    AppointmentReschedule,
    AppointmentResponse,
    AppointmentWithPatientResponse,
    BillingResponse,
    BillingWithNamesResponse,
    ConsultationCreate,
    ConsultationResponse,
    MedicalRecordResponse,
    MedicalRecordUpdate,
    MedicationResponse,
    OperationResult,
    RescheduleResult,
    ScheduleCreate,
    ScheduleResponse,
    ScheduleUpdate,
    TestResponse,
)
from clinic.domain.appointment_engine import AppointmentEngine
from clinic.domain.billing_engine import BillingEngine
from clinic.domain.consultation import ConsultationWorkflow
from clinic.domain.errors import NotFoundError
from clinic.domain.schedule_engine import ScheduleEngine
from . import read_models

logger = get_app_logger(__name__)


class DoctorService:
    """
    Operations scoped to one doctor. Every lookup is filtered by the
    caller's doctor_id, so another doctor's rows read as not found.
    """

    def __init__(self, db: AsyncSession, config: Optional[ClinicConfig] = None):
        self.db = db
        self.config = config or get_config().clinic
        self.appointment_engine = AppointmentEngine(db, self.config)
        self.schedule_engine = ScheduleEngine(db, self.config)
        self.consultations = ConsultationWorkflow(db, self.config)
        self.billing_engine = BillingEngine(db)
        self.records = Repository(db, MedicalRecord, "Medical record")

    async def get_appointments(
        self, doctor_id: int, status: Optional[AppointmentStatus] = None
    ) -> list[AppointmentWithPatientResponse]:
        where = [Appointment.doctor_id == doctor_id]
        if status is not None:
            where.append(Appointment.status == status)
        return await read_models.appointments_with_patient(self.db, *where)

    async def approve_appointment(
        self, doctor_id: int, appointment_id: int
    ) -> AppointmentResponse:
        appointment = await self.appointment_engine.approve(doctor_id, appointment_id)
        return AppointmentResponse.model_validate(appointment)

    async def cancel_appointment(
        self, doctor_id: int, appointment_id: int
    ) -> OperationResult:
        await self.appointment_engine.cancel(appointment_id, doctor_id=doctor_id)
        return OperationResult(message="Appointment canceled")

    async def reschedule_appointment(
        self, doctor_id: int, appointment_id: int, data: AppointmentReschedule
    ) -> RescheduleResult:
        appointment = await self.appointment_engine.reschedule(
            Role.DOCTOR,
            appointment_id,
            data.new_appointment_date,
            doctor_id=doctor_id,
        )
        return RescheduleResult(
            message="Appointment rescheduled",
            appointment=AppointmentResponse.model_validate(appointment),
        )

    async def conduct_consultation(
        self, doctor_id: int, appointment_id: int, data: ConsultationCreate
    ) -> ConsultationResponse:
        outcome = await self.consultations.conduct(doctor_id, appointment_id, data)
        return ConsultationResponse(
            record_id=outcome.record.record_id,
            appointment_id=outcome.appointment.appointment_id,
            appointment_status=outcome.appointment.status,
            billing=BillingResponse.model_validate(outcome.billing),
            dropped_medication_ids=outcome.dropped_medication_ids,
        )

    async def get_patient_records(
        self, patient_id: int
    ) -> list[MedicalRecordResponse]:
        """
        Full history of the patient, including records written by other
        doctors, so the treating doctor sees prior findings.
        """
        records = await read_models.medical_records(self.db, patient_id)
        if not records:
            raise NotFoundError("Medical records for patient", patient_id)
        return records

    async def update_medical_record(
        self,
        doctor_id: int,
        record_id: int,
        patient_id: int,
        data: MedicalRecordUpdate,
    ) -> MedicalRecordResponse:
        record = await self.records.get_or_raise(
            record_id,
            MedicalRecord.doctor_id == doctor_id,
            MedicalRecord.patient_id == patient_id,
            for_update=True,
        )
        for field_name, value in data.model_dump(exclude_unset=True).items():
            setattr(record, field_name, value)
        await self.db.flush()

        logger.info(
            "Medical record updated",
            record_id=record_id,
            fields=sorted(data.model_fields_set),
        )
        updated = await read_models.medical_records(
            self.db, patient_id, record_id=record_id
        )
        return updated[0]

    async def mark_bill_paid(self, doctor_id: int, billing_id: int) -> BillingResponse:
        billing = await self.billing_engine.mark_paid(billing_id, doctor_id=doctor_id)
        return BillingResponse.model_validate(billing)

    async def get_bills(self, doctor_id: int) -> list[BillingWithNamesResponse]:
        return await read_models.billings_with_names(
            self.db, Billing.doctor_id == doctor_id
        )

    async def list_tests(self) -> list[TestResponse]:
        tests = await Repository(self.db, Test).find_all(order_by=(Test.test_name,))
        return [TestResponse.model_validate(t) for t in tests]

    async def list_medications(self) -> list[MedicationResponse]:
        medications = await Repository(self.db, Medication).find_all(
            order_by=(Medication.medication_name,)
        )
        return [MedicationResponse.model_validate(m) for m in medications]

    async def create_schedule(
        self, doctor_id: int, data: ScheduleCreate
    ) -> ScheduleResponse:
        schedule = await self.schedule_engine.create(
            doctor_id, data.start_date, data.end_date
        )
        return ScheduleResponse.model_validate(schedule)

    async def update_schedule(
        self, doctor_id: int, schedule_id: int, data: ScheduleUpdate
    ) -> ScheduleResponse:
        schedule = await self.schedule_engine.update(
            schedule_id,
            data.start_date,
            data.end_date,
            data.status,
            doctor_id=doctor_id,
        )
        return ScheduleResponse.model_validate(schedule)

    async def list_schedules(self, doctor_id: int) -> list[ScheduleResponse]:
        schedules = await self.schedule_engine.list_for_doctor(doctor_id)
        return [ScheduleResponse.model_validate(s) for s in schedules]

    async def cancel_schedule(self, doctor_id: int, schedule_id: int) -> ScheduleResponse:
        schedule = await self.schedule_engine.cancel(schedule_id, doctor_id=doctor_id)
        return ScheduleResponse.model_validate(schedule)

    async def complete_schedule(
        self, doctor_id: int, schedule_id: int
    ) -> ScheduleResponse:
        schedule = await self.schedule_engine.complete(schedule_id, doctor_id=doctor_id)
        return ScheduleResponse.model_validate(schedule)


__all__ = ["DoctorService"]
