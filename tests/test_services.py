"""
Role services on top of the engines. Setup and the call under test run in
separate units of work, the way two API requests would.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from clinic.db.models import AppointmentStatus, Role
from clinic.db.schemas import (
    AppointmentCreate,
    ConsultationCreate,
    DoctorRegister,
    DoctorUpdate,
    LoginRequest,
    MedicalRecordUpdate,
    MedicationCreate,
    PatientRegister,
    PersonalInfoUpdate,
    PrescriptionCreate,
    TestCreate,
    TestUpdate,
)
from clinic.domain import AlreadyTakenError, AuthenticationError, NotFoundError
from clinic.domain.registration import RegistrationGate
from clinic.services.v1 import (
    AdminService,
    AuthService,
    DoctorService,
    PatientService,
    UserService,
)
from tests.factories import (
    make_doctor,
    make_medication,
    make_patient,
    make_schedule,
    make_specialization,
    make_test,
    make_user,
)

DAY = datetime(2099, 9, 15, 9, 0)


async def _completed_visit(db_manager, config) -> dict:
    async with db_manager.session() as session:
        patient = await make_patient(session)
        login = await make_user(session, "dr.smith")
        doctor = await make_doctor(session, user_id=login.user_id)
        await make_schedule(session, doctor, DAY, DAY + timedelta(hours=8))
        xray = await make_test(session, "Chest X-Ray", "80.00")
        paracetamol = await make_medication(session, "Paracetamol", "0.50")

        patients = PatientService(session, config)
        appointment = await patients.request_appointment(
            patient.patient_id,
            AppointmentCreate(
                doctor_id=doctor.doctor_id,
                appointment_date=DAY + timedelta(hours=2),
                symptoms="Fever",
            ),
        )
        doctors = DoctorService(session, config)
        await doctors.approve_appointment(doctor.doctor_id, appointment.appointment_id)
        consultation = await doctors.conduct_consultation(
            doctor.doctor_id,
            appointment.appointment_id,
            ConsultationCreate(
                symptoms="Fever",
                test_ids=[xray.test_id],
                prescriptions=[
                    PrescriptionCreate(
                        medication_id=paracetamol.medication_id,
                        dosage="1 tablet every 8h",
                        duration_days=4,
                        quantity=12,
                    )
                ],
                consultation_fee=Decimal("40.00"),
            ),
        )
        return {
            "patient_id": patient.patient_id,
            "doctor_id": doctor.doctor_id,
            "appointment_id": appointment.appointment_id,
            "record_id": consultation.record_id,
            "billing_id": consultation.billing.billing_id,
        }


class TestPatientService:
    @pytest.mark.asyncio
    async def test_history_details_and_bills(self, db_manager, clinic_config):
        visit = await _completed_visit(db_manager, clinic_config)

        async with db_manager.session() as session:
            service = PatientService(session, clinic_config)
            history = await service.get_medical_history(visit["patient_id"])
            tests = await service.get_test_details(visit["patient_id"])
            prescriptions = await service.get_prescription_details(visit["patient_id"])
            bills = await service.get_bills(visit["patient_id"])

        [record] = history
        assert record.doctor_name == "Dr. John Smith"
        assert record.billing.grand_total == Decimal("126.00")
        assert [t.test_name for t in tests] == ["Chest X-Ray"]
        assert prescriptions[0].total_price == Decimal("6.00")
        assert bills[0].patient_name == "Jane Roe"

    @pytest.mark.asyncio
    async def test_update_personal_info_changes_login(
        self, db_manager, hasher, token_service, clinic_config
    ):
        async with db_manager.session() as session:
            users = UserService(session, hasher)
            me = await users.register_patient(
                PatientRegister(
                    username="jane.roe",
                    password="first-password",
                    full_name="Jane Roe",
                    email="jane.roe@clinic.org",
                    date_of_birth=date(1990, 4, 12),
                )
            )
            await users.register_patient(
                PatientRegister(
                    username="taken.name",
                    password="other-password",
                    full_name="Max Mustermann",
                    email="max@clinic.org",
                    date_of_birth=date(1985, 1, 1),
                )
            )

        async with db_manager.session() as session:
            with pytest.raises(AlreadyTakenError):
                await PatientService(session, clinic_config).update_personal_info(
                    me.patient_id, PersonalInfoUpdate(username="taken.name"), hasher
                )

        async with db_manager.session() as session:
            profile = await PatientService(session, clinic_config).update_personal_info(
                me.patient_id,
                PersonalInfoUpdate(
                    username="jane.r",
                    new_password="second-password",
                    contact_number="555-0100",
                ),
                hasher,
            )

        assert profile.username == "jane.r"
        assert profile.contact_number == "555-0100"

        async with db_manager.session() as session:
            auth = AuthService(session, hasher, token_service)
            token = await auth.login(
                LoginRequest(username="jane.r", password="second-password")
            )
            assert token.role is Role.PATIENT
            with pytest.raises(AuthenticationError):
                await auth.login(
                    LoginRequest(username="jane.r", password="first-password")
                )

    @pytest.mark.asyncio
    async def test_recasing_own_username_is_allowed(
        self, db_manager, hasher, token_service, clinic_config
    ):
        async with db_manager.session() as session:
            me = await UserService(session, hasher).register_patient(
                PatientRegister(
                    username="alice",
                    password="alice-password",
                    full_name="Alice Liddell",
                    email="alice@clinic.org",
                    date_of_birth=date(1992, 5, 4),
                )
            )

        async with db_manager.session() as session:
            profile = await PatientService(session, clinic_config).update_personal_info(
                me.patient_id, PersonalInfoUpdate(username="Alice"), hasher
            )

        assert profile.username == "Alice"

        async with db_manager.session() as session:
            token = await AuthService(session, hasher, token_service).login(
                LoginRequest(username="alice", password="alice-password")
            )
            assert token.role is Role.PATIENT

    @pytest.mark.asyncio
    async def test_search_lists_linked_doctors_only(
        self, db_session, hasher, clinic_config
    ):
        cardiology = await make_specialization(db_session, "Cardiology")
        dermatology = await make_specialization(db_session, "Dermatology")
        user = await RegistrationGate(db_session, hasher).create_user(
            "dr.heart", "doctor-password", Role.DOCTOR
        )
        heart = await make_doctor(
            db_session, "Dr. Heart", user_id=user.user_id, specializations=[cardiology]
        )
        # No login: left over from a deleted account
        await make_doctor(
            db_session, "Dr. Former", email="former@clinic.org", specializations=[cardiology]
        )
        await make_doctor(
            db_session, "Dr. Skin", email="skin@clinic.org", specializations=[dermatology]
        )

        found = await PatientService(db_session, clinic_config).search_doctors(
            "cardiology"
        )

        assert [d.doctor_id for d in found] == [heart.doctor_id]
        assert found[0].specializations[0].specialization_name == "Cardiology"


class TestDoctorService:
    @pytest.mark.asyncio
    async def test_update_medical_record(self, db_manager, clinic_config):
        visit = await _completed_visit(db_manager, clinic_config)

        async with db_manager.session() as session:
            updated = await DoctorService(session, clinic_config).update_medical_record(
                visit["doctor_id"],
                visit["record_id"],
                visit["patient_id"],
                MedicalRecordUpdate(treatment_plan="Fluids and rest"),
            )

        assert updated.treatment_plan == "Fluids and rest"
        assert updated.symptoms == "Fever"
        assert len(updated.prescriptions) == 1

    @pytest.mark.asyncio
    async def test_record_of_another_patient_is_not_found(
        self, db_manager, clinic_config
    ):
        visit = await _completed_visit(db_manager, clinic_config)

        async with db_manager.session() as session:
            with pytest.raises(NotFoundError):
                await DoctorService(session, clinic_config).update_medical_record(
                    visit["doctor_id"],
                    visit["record_id"],
                    visit["patient_id"] + 1,
                    MedicalRecordUpdate(treatment_plan="x"),
                )

    @pytest.mark.asyncio
    async def test_patient_without_records(self, db_session, clinic_config):
        patient = await make_patient(db_session)

        with pytest.raises(NotFoundError):
            await DoctorService(db_session, clinic_config).get_patient_records(
                patient.patient_id
            )

    @pytest.mark.asyncio
    async def test_appointments_filtered_by_status(self, db_manager, clinic_config):
        visit = await _completed_visit(db_manager, clinic_config)

        async with db_manager.session() as session:
            service = DoctorService(session, clinic_config)
            completed = await service.get_appointments(
                visit["doctor_id"], AppointmentStatus.COMPLETED
            )
            requested = await service.get_appointments(
                visit["doctor_id"], AppointmentStatus.REQUESTED
            )

        assert [a.appointment_id for a in completed] == [visit["appointment_id"]]
        assert completed[0].patient_name == "Jane Roe"
        assert requested == []


class TestAdminService:
    @pytest.mark.asyncio
    async def test_register_and_update_doctor(self, db_manager, hasher, clinic_config):
        async with db_manager.session() as session:
            cardiology = await make_specialization(session, "Cardiology")
            neurology = await make_specialization(session, "Neurology")
            ids = cardiology.specialization_id, neurology.specialization_id

        async with db_manager.session() as session:
            doctor = await AdminService(session, hasher, clinic_config).register_doctor(
                DoctorRegister(
                    username="dr.grey",
                    password="doctor-password",
                    full_name="Dr. Ada Grey",
                    email="ada@clinic.org",
                    specialization_ids=[ids[0]],
                )
            )

        assert [s.specialization_name for s in doctor.specializations] == ["Cardiology"]
        assert doctor.is_active

        async with db_manager.session() as session:
            updated = await AdminService(session, hasher, clinic_config).update_doctor(
                doctor.doctor_id,
                DoctorUpdate(experience_years=7, specialization_ids=[ids[1]]),
            )

        assert updated.experience_years == 7
        assert [s.specialization_name for s in updated.specializations] == ["Neurology"]

    @pytest.mark.asyncio
    async def test_unknown_specialization(self, db_session, hasher, clinic_config):
        with pytest.raises(NotFoundError):
            await AdminService(db_session, hasher, clinic_config).register_doctor(
                DoctorRegister(
                    username="dr.nobody",
                    password="doctor-password",
                    full_name="Dr. Nobody",
                    email="nobody@clinic.org",
                    specialization_ids=[404],
                )
            )

    @pytest.mark.asyncio
    async def test_delete_patient_cancels_open_appointments(
        self, db_manager, hasher, clinic_config
    ):
        async with db_manager.session() as session:
            patient = await UserService(session, hasher).register_patient(
                PatientRegister(
                    username="jane.roe",
                    password="patient-password",
                    full_name="Jane Roe",
                    email="jane.roe@clinic.org",
                    date_of_birth=date(1990, 4, 12),
                )
            )
            login = await make_user(session, "dr.smith")
            doctor = await make_doctor(session, user_id=login.user_id)
            await make_schedule(session, doctor, DAY, DAY + timedelta(hours=8))
            appointment = await PatientService(session, clinic_config).request_appointment(
                patient.patient_id,
                AppointmentCreate(
                    doctor_id=doctor.doctor_id, appointment_date=DAY + timedelta(hours=1)
                ),
            )

        async with db_manager.session() as session:
            admin = AdminService(session, hasher, clinic_config)
            result = await admin.delete_patient(patient.patient_id)
            assert result.success

        async with db_manager.session() as session:
            admin = AdminService(session, hasher, clinic_config)
            viewed = await admin.view_appointment(appointment.appointment_id)
            profile = await admin.get_patient(patient.patient_id)
            assert await admin.registration.is_username_available("jane.roe")

            with pytest.raises(NotFoundError):
                await admin.delete_patient(patient.patient_id)

        assert viewed.status is AppointmentStatus.CANCELED
        assert profile.user_id is None

    @pytest.mark.asyncio
    async def test_catalog_names_are_unique(self, db_session, hasher, clinic_config):
        admin = AdminService(db_session, hasher, clinic_config)
        blood = await admin.add_test(TestCreate(test_name="Blood Panel", price=Decimal("50")))
        await admin.add_test(TestCreate(test_name="Urinalysis", price=Decimal("12.5")))
        await admin.add_medication(
            MedicationCreate(medication_name="Ibuprofen", price_per_unit=Decimal("0.8"))
        )

        with pytest.raises(AlreadyTakenError):
            await admin.add_test(TestCreate(test_name="Blood Panel", price=Decimal("1")))
        with pytest.raises(AlreadyTakenError):
            await admin.update_test(blood.test_id, TestUpdate(test_name="Urinalysis"))
        with pytest.raises(AlreadyTakenError):
            await admin.add_medication(
                MedicationCreate(medication_name="Ibuprofen", price_per_unit=Decimal("1"))
            )

        repriced = await admin.update_test(blood.test_id, TestUpdate(price=Decimal("55.00")))
        assert repriced.price == Decimal("55.00")
        assert repriced.test_name == "Blood Panel"
