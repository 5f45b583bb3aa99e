# clinic/services/v1/patient_service.py
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from common import ClinicConfig, get_app_logger, get_config
from clinic.db.models import (
    Appointment,
    Billing,
    Doctor,
    INACTIVE_DESIGNATION,
    MedicalRecord,
    MedicalRecordTest,
    Patient,
    Prescription,
    Role,
    ScheduleStatus,
    Specialization,
    Test,
    User,
)
from clinic.db.repositories import Repository
from clinic.db.schemas import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
    AppointmentWithDoctorResponse,
    BillingWithNamesResponse,
    DoctorResponse,
    MedicalRecordResponse,
    OperationResult,
    PatientPrescriptionDetail,
    PatientProfileResponse,
    PatientResponse,
    PatientTestDetail,
    PersonalInfoUpdate,
    RescheduleResult,
    ScheduleResponse,
)
from clinic.domain.appointment_engine import AppointmentEngine
from clinic.domain.errors import NotFoundError
from clinic.domain.registration import RegistrationGate
from clinic.domain.schedule_engine import ScheduleEngine
from clinic.security import PasswordHasher
from . import read_models

logger = get_app_logger(__name__)


class PatientService:
    """Operations a patient performs on their own data."""

    def __init__(self, db: AsyncSession, config: Optional[ClinicConfig] = None):
        self.db = db
        self.config = config or get_config().clinic
        self.patients = Repository(db, Patient)
        self.doctors = Repository(db, Doctor)
        self.appointment_engine = AppointmentEngine(db, self.config)
        self.schedule_engine = ScheduleEngine(db, self.config)

    async def get_personal_info(self, patient_id: int) -> PatientProfileResponse:
        """
        Note: one round trip; the username comes from an outer join so an
        unlinked profile still renders.
        """
        query = (
            select(Patient, User.username)
            .outerjoin(User, User.user_id == Patient.user_id)
            .where(Patient.patient_id == patient_id)
            .execution_options(logging_token="PatientService.get_personal_info")
        )
        row = (await self.db.execute(query)).first()
        if row is None:
            raise NotFoundError("Patient", patient_id)
        patient, username = row
        return PatientProfileResponse(
            **PatientResponse.model_validate(patient).model_dump(),
            username=username,
        )

    async def update_personal_info(
        self,
        patient_id: int,
        data: PersonalInfoUpdate,
        hasher: PasswordHasher,
    ) -> PatientProfileResponse:
        """
        Apply the supplied fields. A new username must be free; a new
        password is re-hashed.
        """
        patient = await self.patients.get_or_raise(patient_id, for_update=True)
        changes = data.model_dump(
            exclude_unset=True, exclude={"username", "new_password"}
        )
        for field_name, value in changes.items():
            setattr(patient, field_name, value)

        if patient.user_id is not None and (data.username or data.new_password):
            user = await Repository(self.db, User).get_or_raise(patient.user_id)
            new_username = data.username.strip() if data.username else None
            if new_username and new_username.lower() != user.username.lower():
                await RegistrationGate(self.db, hasher).ensure_username_available(
                    new_username
                )
            if new_username:
                user.username = new_username
            if data.new_password:
                user.password_hash = hasher.hash(data.new_password)

        await self.db.flush()
        logger.info(
            "Personal info updated",
            patient_id=patient_id,
            fields=sorted(data.model_fields_set),
        )
        return await self.get_personal_info(patient_id)

    async def search_doctors(
        self, specialization: Optional[str] = None
    ) -> list[DoctorResponse]:
        """Active doctors, optionally filtered by specialization name."""
        where = [
            Doctor.user_id.is_not(None),
            func.coalesce(Doctor.designation, "") != INACTIVE_DESIGNATION,
        ]
        if specialization:
            where.append(
                Doctor.specializations.any(
                    func.lower(Specialization.specialization_name)
                    == specialization.strip().lower()
                )
            )
        doctors = await self.doctors.find_all(
            *where,
            order_by=(Doctor.full_name,),
            options=read_models.DOCTOR_WITH_SPECIALIZATIONS,
        )
        return [DoctorResponse.model_validate(doctor) for doctor in doctors]

    async def _active_doctor(self, doctor_id: int) -> Doctor:
        doctor = await self.doctors.get_or_raise(doctor_id)
        if not doctor.is_active or doctor.user_id is None:
            raise NotFoundError("Doctor", doctor_id)
        return doctor

    async def get_doctor_schedule(self, doctor_id: int) -> list[ScheduleResponse]:
        """Bookable windows only."""
        await self._active_doctor(doctor_id)
        schedules = await self.schedule_engine.list_for_doctor(
            doctor_id, ScheduleStatus.SCHEDULED
        )
        return [ScheduleResponse.model_validate(s) for s in schedules]

    async def request_appointment(
        self, patient_id: int, data: AppointmentCreate
    ) -> AppointmentResponse:
        await self._active_doctor(data.doctor_id)
        appointment = await self.appointment_engine.request(
            patient_id=patient_id,
            doctor_id=data.doctor_id,
            appointment_date=data.appointment_date,
            symptoms=data.symptoms,
        )
        return AppointmentResponse.model_validate(appointment)

    async def list_appointments(
        self, patient_id: int
    ) -> list[AppointmentWithDoctorResponse]:
        return await read_models.appointments_with_doctor(
            self.db, Appointment.patient_id == patient_id
        )

    async def reschedule_appointment(
        self, patient_id: int, appointment_id: int, data: AppointmentReschedule
    ) -> RescheduleResult:
        appointment = await self.appointment_engine.reschedule(
            Role.PATIENT,
            appointment_id,
            data.new_appointment_date,
            patient_id=patient_id,
        )
        return RescheduleResult(
            message=(
                "Appointment rescheduled; it awaits the doctor's approval "
                "again with status 'Requested'"
            ),
            appointment=AppointmentResponse.model_validate(appointment),
        )

    async def cancel_appointment(
        self, patient_id: int, appointment_id: int
    ) -> OperationResult:
        await self.appointment_engine.cancel(appointment_id, patient_id=patient_id)
        return OperationResult(message="Appointment canceled")

    async def get_medical_history(self, patient_id: int) -> list[MedicalRecordResponse]:
        return await read_models.medical_records(self.db, patient_id)

    async def get_test_details(self, patient_id: int) -> list[PatientTestDetail]:
        query = (
            select(
                MedicalRecord.appointment_id,
                Doctor.full_name,
                Test.test_id,
                Test.test_name,
                Test.price,
            )
            .join(MedicalRecordTest, MedicalRecordTest.record_id == MedicalRecord.record_id)
            .join(Test, Test.test_id == MedicalRecordTest.test_id)
            .join(Doctor, Doctor.doctor_id == MedicalRecord.doctor_id)
            .where(MedicalRecord.patient_id == patient_id)
            .order_by(MedicalRecord.record_id, Test.test_id)
            .execution_options(logging_token="PatientService.get_test_details")
        )
        result = await self.db.execute(query)
        return [
            PatientTestDetail(
                appointment_id=appointment_id,
                doctor_name=doctor_name,
                test_id=test_id,
                test_name=test_name,
                price=price,
            )
            for appointment_id, doctor_name, test_id, test_name, price in result.all()
        ]

    async def get_prescription_details(
        self, patient_id: int
    ) -> list[PatientPrescriptionDetail]:
        query = (
            select(Prescription, MedicalRecord.appointment_id, Doctor.full_name)
            .join(MedicalRecord, MedicalRecord.record_id == Prescription.record_id)
            .join(Doctor, Doctor.doctor_id == MedicalRecord.doctor_id)
            .where(MedicalRecord.patient_id == patient_id)
            .order_by(Prescription.prescription_id)
            .execution_options(logging_token="PatientService.get_prescription_details")
        )
        result = await self.db.execute(query)
        return [
            PatientPrescriptionDetail(
                appointment_id=appointment_id,
                doctor_name=doctor_name,
                medication_name=p.medication_name,
                dosage=p.dosage,
                duration_days=p.duration_days,
                quantity=p.quantity,
                total_price=p.total_price,
            )
            for p, appointment_id, doctor_name in result.all()
        ]

    async def get_bills(self, patient_id: int) -> list[BillingWithNamesResponse]:
        return await read_models.billings_with_names(
            self.db, Billing.patient_id == patient_id
        )


__all__ = ["PatientService"]
