from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from clinic.db.models import (
    Appointment,
    AppointmentStatus,
    Billing,
    BillingStatus,
    MedicalRecord,
)
from clinic.db.schemas import ConsultationCreate, PrescriptionCreate
from clinic.domain import InvalidTransitionError, NotFoundError
from clinic.domain.appointment_engine import AppointmentEngine
from clinic.domain.consultation import ConsultationWorkflow, money
from tests.factories import (
    make_doctor,
    make_medication,
    make_patient,
    make_schedule,
    make_test,
)

DAY = datetime(2099, 5, 10, 9, 0)


async def _scheduled_appointment(session, config, *, approve: bool = True):
    patient = await make_patient(session)
    doctor = await make_doctor(session)
    await make_schedule(session, doctor, DAY, DAY + timedelta(hours=8))
    engine = AppointmentEngine(session, config)
    appointment = await engine.request(
        patient.patient_id, doctor.doctor_id, DAY + timedelta(hours=1), "Headache"
    )
    if approve:
        await engine.approve(doctor.doctor_id, appointment.appointment_id)
    return doctor, appointment


class TestMoney:
    def test_rounds_to_cents(self):
        assert money(Decimal("10.005")) == Decimal("10.01")
        assert str(money(Decimal("7"))) == "7.00"


class TestConductConsultation:
    @pytest.mark.asyncio
    async def test_bill_totals(self, db_session, clinic_config):
        doctor, appointment = await _scheduled_appointment(db_session, clinic_config)
        blood = await make_test(db_session, "Blood Panel", "50.00")
        xray = await make_test(db_session, "Chest X-Ray", "30.00")
        amoxicillin = await make_medication(db_session, "Amoxicillin", "20.00")

        data = ConsultationCreate(
            symptoms="Headache",
            treatment_plan="Rest",
            test_ids=[blood.test_id, xray.test_id],
            prescriptions=[
                PrescriptionCreate(
                    medication_id=amoxicillin.medication_id,
                    dosage="500mg twice daily",
                    duration_days=5,
                    quantity=10,
                )
            ],
            consultation_fee=Decimal("100.00"),
        )
        outcome = await ConsultationWorkflow(db_session, clinic_config).conduct(
            doctor.doctor_id, appointment.appointment_id, data
        )

        billing = outcome.billing
        assert billing.total_tests_price == Decimal("80.00")
        assert billing.total_medications_price == Decimal("200.00")
        assert billing.consultation_fee == Decimal("100.00")
        assert billing.grand_total == Decimal("380.00")
        assert billing.status is BillingStatus.PENDING
        assert outcome.appointment.status is AppointmentStatus.COMPLETED

        record = outcome.record
        assert record.billing_id == billing.billing_id
        assert record.total_price == Decimal("280.00")
        assert billing.medical_record_id == record.record_id

        [prescription] = outcome.prescriptions
        assert prescription.total_price == Decimal("200.00")
        assert prescription.medication_name == "Amoxicillin"
        assert prescription.billing_id == billing.billing_id
        assert outcome.dropped_medication_ids == []

    @pytest.mark.asyncio
    async def test_unknown_medication_is_dropped(self, db_session, clinic_config):
        doctor, appointment = await _scheduled_appointment(db_session, clinic_config)
        ibuprofen = await make_medication(db_session, "Ibuprofen", "2.50")

        data = ConsultationCreate(
            prescriptions=[
                PrescriptionCreate(
                    medication_id=ibuprofen.medication_id,
                    dosage="200mg",
                    duration_days=3,
                    quantity=4,
                ),
                PrescriptionCreate(
                    medication_id=4242, dosage="1 tablet", duration_days=1, quantity=1
                ),
            ],
            consultation_fee=Decimal("50.00"),
        )
        outcome = await ConsultationWorkflow(db_session, clinic_config).conduct(
            doctor.doctor_id, appointment.appointment_id, data
        )

        assert outcome.dropped_medication_ids == [4242]
        assert len(outcome.prescriptions) == 1
        assert outcome.billing.total_medications_price == Decimal("10.00")
        assert outcome.billing.grand_total == Decimal("60.00")

    @pytest.mark.asyncio
    async def test_unknown_test_ids_are_ignored(self, db_session, clinic_config):
        doctor, appointment = await _scheduled_appointment(db_session, clinic_config)
        blood = await make_test(db_session, "Blood Panel", "50.00")

        data = ConsultationCreate(
            test_ids=[blood.test_id, blood.test_id, 777],
            consultation_fee=Decimal("0"),
        )
        outcome = await ConsultationWorkflow(db_session, clinic_config).conduct(
            doctor.doctor_id, appointment.appointment_id, data
        )

        assert outcome.billing.total_tests_price == Decimal("50.00")
        assert outcome.billing.grand_total == Decimal("50.00")

    @pytest.mark.asyncio
    async def test_requested_appointment_cannot_be_consulted(
        self, db_session, clinic_config
    ):
        doctor, appointment = await _scheduled_appointment(
            db_session, clinic_config, approve=False
        )

        with pytest.raises(InvalidTransitionError):
            await ConsultationWorkflow(db_session, clinic_config).conduct(
                doctor.doctor_id,
                appointment.appointment_id,
                ConsultationCreate(consultation_fee=Decimal("10.00")),
            )

    @pytest.mark.asyncio
    async def test_second_consultation_fails(self, db_session, clinic_config):
        doctor, appointment = await _scheduled_appointment(db_session, clinic_config)
        workflow = ConsultationWorkflow(db_session, clinic_config)
        data = ConsultationCreate(consultation_fee=Decimal("10.00"))
        await workflow.conduct(doctor.doctor_id, appointment.appointment_id, data)

        with pytest.raises(InvalidTransitionError):
            await workflow.conduct(doctor.doctor_id, appointment.appointment_id, data)

    @pytest.mark.asyncio
    async def test_other_doctor_gets_not_found(self, db_session, clinic_config):
        _, appointment = await _scheduled_appointment(db_session, clinic_config)
        other = await make_doctor(db_session, "Dr. Ada Grey", email="ada@clinic.org")

        with pytest.raises(NotFoundError):
            await ConsultationWorkflow(db_session, clinic_config).conduct(
                other.doctor_id,
                appointment.appointment_id,
                ConsultationCreate(consultation_fee=Decimal("10.00")),
            )


class TestConsultationAtomicity:
    @pytest.mark.asyncio
    async def test_rejected_medication_rolls_back_everything(
        self, db_manager, strict_config
    ):
        async with db_manager.session() as session:
            doctor, appointment = await _scheduled_appointment(session, strict_config)
            doctor_id, appointment_id = doctor.doctor_id, appointment.appointment_id

        data = ConsultationCreate(
            prescriptions=[
                PrescriptionCreate(
                    medication_id=4242, dosage="1 tablet", duration_days=1, quantity=1
                )
            ],
            consultation_fee=Decimal("25.00"),
        )
        with pytest.raises(NotFoundError):
            async with db_manager.session() as session:
                await ConsultationWorkflow(session, strict_config).conduct(
                    doctor_id, appointment_id, data
                )

        async with db_manager.session() as session:
            status = await session.scalar(
                select(Appointment.status).where(
                    Appointment.appointment_id == appointment_id
                )
            )
            records = await session.scalar(select(func.count(MedicalRecord.record_id)))
            bills = await session.scalar(select(func.count(Billing.billing_id)))

        assert status is AppointmentStatus.SCHEDULED
        assert records == 0
        assert bills == 0
