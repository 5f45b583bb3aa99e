# clinic/services/v1/admin_service.py
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from common import ClinicConfig, get_app_logger, get_config
from clinic.db.models import (
    Administrator,
    Appointment,
    Doctor,
    INACTIVE_DESIGNATION,
    Medication,
    Patient,
    Role,
    Specialization,
    Test,
    User,
)
from clinic.db.repositories import Repository
from clinic.db.schemas import (
    AdministratorRegister,
    AdministratorResponse,
    AppointmentReschedule,
    AppointmentResponse,
    AppointmentWithDoctorResponse,
    BillingResponse,
    BillingWithNamesResponse,
    DoctorRegister,
    DoctorResponse,
    DoctorUpdate,
    MedicationCreate,
    MedicationResponse,
    MedicationUpdate,
    OperationResult,
    PatientResponse,
    PatientUpdate,
    RescheduleResult,
    ScheduleResponse,
    ScheduleUpdate,
    ScheduleWithDoctorResponse,
    SpecializationResponse,
    TestCreate,
    TestResponse,
    TestUpdate,
    UsernameAvailability,
)
from clinic.domain.appointment_engine import AppointmentEngine
from clinic.domain.billing_engine import BillingEngine
from clinic.domain.errors import AlreadyTakenError, NotFoundError
from clinic.domain.registration import RegistrationGate
from clinic.domain.schedule_engine import ScheduleEngine
from clinic.security import PasswordHasher
from . import read_models

logger = get_app_logger(__name__)


class AdminService:
    """Clinic-wide management. Nothing here is scoped to a caller."""

    def __init__(
        self,
        db: AsyncSession,
        hasher: PasswordHasher,
        config: Optional[ClinicConfig] = None,
    ):
        self.db = db
        self.config = config or get_config().clinic
        self.registration = RegistrationGate(db, hasher)
        self.appointment_engine = AppointmentEngine(db, self.config)
        self.schedule_engine = ScheduleEngine(db, self.config)
        self.billing_engine = BillingEngine(db)
        self.doctors = Repository(db, Doctor)
        self.patients = Repository(db, Patient)
        self.users = Repository(db, User)
        self.specializations = Repository(db, Specialization)
        self.tests = Repository(db, Test)
        self.medications = Repository(db, Medication)

    # Accounts

    async def check_username(self, username: str) -> UsernameAvailability:
        return UsernameAvailability(
            username=username,
            available=await self.registration.is_username_available(username),
        )

    async def register_admin(self, data: AdministratorRegister) -> AdministratorResponse:
        user = await self.registration.create_user(
            data.username, data.password, Role.ADMINISTRATOR
        )
        admin = Administrator(
            user_id=user.user_id, full_name=data.full_name, email=data.email
        )
        self.db.add(admin)
        await self.db.flush()
        logger.info("Administrator registered", admin_id=admin.admin_id)
        return AdministratorResponse.model_validate(admin)

    async def _resolve_specializations(
        self, specialization_ids: Sequence[int]
    ) -> list[Specialization]:
        unique_ids = list(dict.fromkeys(specialization_ids))
        if not unique_ids:
            return []
        found = await self.specializations.find_all(
            Specialization.specialization_id.in_(unique_ids)
        )
        missing = set(unique_ids) - {s.specialization_id for s in found}
        if missing:
            raise NotFoundError("Specialization", min(missing))
        return found

    async def register_doctor(self, data: DoctorRegister) -> DoctorResponse:
        specializations = await self._resolve_specializations(data.specialization_ids)
        user = await self.registration.create_user(
            data.username, data.password, Role.DOCTOR
        )
        doctor = Doctor(
            user_id=user.user_id,
            specializations=specializations,
            **data.model_dump(
                exclude={"username", "password", "specialization_ids"}
            ),
        )
        self.db.add(doctor)
        await self.db.flush()
        logger.info("Doctor registered", doctor_id=doctor.doctor_id)
        return await self.get_doctor(doctor.doctor_id)

    async def list_specializations(self) -> list[SpecializationResponse]:
        rows = await self.specializations.find_all(
            order_by=(Specialization.specialization_name,)
        )
        return [SpecializationResponse.model_validate(s) for s in rows]

    # Doctors

    async def _load_doctor(self, doctor_id: int, for_update: bool = False) -> Doctor:
        return await self.doctors.get_or_raise(
            doctor_id,
            options=read_models.DOCTOR_WITH_SPECIALIZATIONS,
            for_update=for_update,
        )

    async def get_doctor(self, doctor_id: int) -> DoctorResponse:
        return DoctorResponse.model_validate(await self._load_doctor(doctor_id))

    async def update_doctor(self, doctor_id: int, data: DoctorUpdate) -> DoctorResponse:
        doctor = await self._load_doctor(doctor_id, for_update=True)
        changes = data.model_dump(exclude_unset=True, exclude={"specialization_ids"})
        for field_name, value in changes.items():
            setattr(doctor, field_name, value)
        if data.specialization_ids is not None:
            doctor.specializations = await self._resolve_specializations(
                data.specialization_ids
            )
        await self.db.flush()
        logger.info(
            "Doctor updated", doctor_id=doctor_id, fields=sorted(data.model_fields_set)
        )
        return DoctorResponse.model_validate(doctor)

    async def _delete_login(self, user_id: Optional[int]) -> None:
        if user_id is None:
            return
        user = await self.users.get(user_id)
        if user is not None:
            await self.db.delete(user)

    async def delete_doctor(self, doctor_id: int) -> OperationResult:
        """
        Remove the doctor's login and retire the profile. History
        (appointments, records, bills) is kept; open appointments are
        canceled.
        """
        doctor = await self.doctors.get_or_raise(doctor_id, for_update=True)
        if doctor.user_id is None:
            raise NotFoundError("Doctor", doctor_id)

        user_id = doctor.user_id
        doctor.user_id = None
        doctor.designation = INACTIVE_DESIGNATION
        await self.db.flush()
        await self._delete_login(user_id)
        canceled = await self.appointment_engine.cancel_open_for(doctor_id=doctor_id)

        logger.info(
            "Doctor deleted", doctor_id=doctor_id, canceled_appointments=canceled
        )
        return OperationResult(message="Doctor deleted")

    # Patients

    async def get_patient(self, patient_id: int) -> PatientResponse:
        return PatientResponse.model_validate(
            await self.patients.get_or_raise(patient_id)
        )

    async def update_patient(
        self, patient_id: int, data: PatientUpdate
    ) -> PatientResponse:
        patient = await self.patients.get_or_raise(patient_id, for_update=True)
        for field_name, value in data.model_dump(exclude_unset=True).items():
            setattr(patient, field_name, value)
        await self.db.flush()
        logger.info(
            "Patient updated", patient_id=patient_id, fields=sorted(data.model_fields_set)
        )
        return PatientResponse.model_validate(patient)

    async def delete_patient(self, patient_id: int) -> OperationResult:
        patient = await self.patients.get_or_raise(patient_id, for_update=True)
        if patient.user_id is None:
            raise NotFoundError("Patient", patient_id)

        user_id = patient.user_id
        patient.user_id = None
        await self.db.flush()
        await self._delete_login(user_id)
        canceled = await self.appointment_engine.cancel_open_for(patient_id=patient_id)

        logger.info(
            "Patient deleted", patient_id=patient_id, canceled_appointments=canceled
        )
        return OperationResult(message="Patient deleted")

    # Appointments

    async def view_appointment(self, appointment_id: int) -> AppointmentWithDoctorResponse:
        found = await read_models.appointments_with_doctor(
            self.db, Appointment.appointment_id == appointment_id
        )
        if not found:
            raise NotFoundError("Appointment", appointment_id)
        return found[0]

    async def reschedule_appointment(
        self, appointment_id: int, data: AppointmentReschedule
    ) -> RescheduleResult:
        appointment = await self.appointment_engine.reschedule(
            Role.ADMINISTRATOR, appointment_id, data.new_appointment_date
        )
        return RescheduleResult(
            message="Appointment rescheduled",
            appointment=AppointmentResponse.model_validate(appointment),
        )

    async def cancel_appointment(self, appointment_id: int) -> OperationResult:
        await self.appointment_engine.cancel(appointment_id)
        return OperationResult(message="Appointment canceled")

    # Schedules

    async def get_doctor_schedules(
        self, doctor_id: int
    ) -> list[ScheduleWithDoctorResponse]:
        doctor = await self.doctors.get_or_raise(doctor_id)
        schedules = await self.schedule_engine.list_for_doctor(doctor_id)
        return [
            ScheduleWithDoctorResponse(
                **ScheduleResponse.model_validate(s).model_dump(),
                doctor_name=doctor.full_name,
            )
            for s in schedules
        ]

    async def update_schedule(
        self, schedule_id: int, data: ScheduleUpdate
    ) -> ScheduleResponse:
        schedule = await self.schedule_engine.update(
            schedule_id, data.start_date, data.end_date, data.status
        )
        return ScheduleResponse.model_validate(schedule)

    async def cancel_schedule(self, schedule_id: int) -> ScheduleResponse:
        return ScheduleResponse.model_validate(
            await self.schedule_engine.cancel(schedule_id)
        )

    async def complete_schedule(self, schedule_id: int) -> ScheduleResponse:
        return ScheduleResponse.model_validate(
            await self.schedule_engine.complete(schedule_id)
        )

    # Billing

    async def list_bills(self) -> list[BillingWithNamesResponse]:
        return await read_models.billings_with_names(self.db)

    async def mark_bill_paid(self, billing_id: int) -> BillingResponse:
        return BillingResponse.model_validate(
            await self.billing_engine.mark_paid(billing_id)
        )

    # Catalog

    async def list_tests(self) -> list[TestResponse]:
        tests = await self.tests.find_all(order_by=(Test.test_name,))
        return [TestResponse.model_validate(t) for t in tests]

    async def add_test(self, data: TestCreate) -> TestResponse:
        if await self.tests.exists(Test.test_name == data.test_name):
            raise AlreadyTakenError(f"Test '{data.test_name}' already exists")
        test = await self.tests.add(Test(**data.model_dump()))
        logger.info("Test added", test_id=test.test_id)
        return TestResponse.model_validate(test)

    async def update_test(self, test_id: int, data: TestUpdate) -> TestResponse:
        test = await self.tests.get_or_raise(test_id, for_update=True)
        if data.test_name and data.test_name != test.test_name:
            if await self.tests.exists(Test.test_name == data.test_name):
                raise AlreadyTakenError(f"Test '{data.test_name}' already exists")
        for field_name, value in data.model_dump(exclude_unset=True).items():
            setattr(test, field_name, value)
        await self.db.flush()
        return TestResponse.model_validate(test)

    async def list_medications(self) -> list[MedicationResponse]:
        medications = await self.medications.find_all(
            order_by=(Medication.medication_name,)
        )
        return [MedicationResponse.model_validate(m) for m in medications]

    async def add_medication(self, data: MedicationCreate) -> MedicationResponse:
        if await self.medications.exists(
            Medication.medication_name == data.medication_name
        ):
            raise AlreadyTakenError(
                f"Medication '{data.medication_name}' already exists"
            )
        medication = await self.medications.add(Medication(**data.model_dump()))
        logger.info("Medication added", medication_id=medication.medication_id)
        return MedicationResponse.model_validate(medication)

    async def update_medication(
        self, medication_id: int, data: MedicationUpdate
    ) -> MedicationResponse:
        medication = await self.medications.get_or_raise(medication_id, for_update=True)
        if data.medication_name and data.medication_name != medication.medication_name:
            if await self.medications.exists(
                Medication.medication_name == data.medication_name
            ):
                raise AlreadyTakenError(
                    f"Medication '{data.medication_name}' already exists"
                )
        for field_name, value in data.model_dump(exclude_unset=True).items():
            setattr(medication, field_name, value)
        await self.db.flush()
        return MedicationResponse.model_validate(medication)


__all__ = ["AdminService"]
