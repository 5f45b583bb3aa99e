# clinic/domain/consultation.py
"""
Consultation workflow: turns a Scheduled appointment into a medical record,
its ordered tests and prescriptions, and a Pending bill.

Everything happens on the caller's session. Nothing is committed here, so
the unit of work around the call decides the outcome as a whole and a
failure at any step leaves no partial record behind.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from common import ClinicConfig, get_app_logger, get_config
from clinic.db.models import (
    ZERO,
    Appointment,
    AppointmentStatus,
    Billing,
    BillingStatus,
    MedicalRecord,
    MedicalRecordTest,
    Medication,
    Prescription,
    Test,
)
from clinic.db.repositories import Repository
from clinic.db.schemas import ConsultationCreate
from .errors import NotFoundError
from .transitions import APPOINTMENT_TRANSITIONS, ensure_transition

logger = get_app_logger(__name__)

CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class ConsultationOutcome:
    appointment: Appointment
    record: MedicalRecord
    billing: Billing
    prescriptions: list[Prescription] = field(default_factory=list)
    dropped_medication_ids: list[int] = field(default_factory=list)


class ConsultationWorkflow:
    def __init__(self, db: AsyncSession, config: Optional[ClinicConfig] = None):
        self.db = db
        self.config = config or get_config().clinic
        self.appointments = Repository(db, Appointment)
        self.tests = Repository(db, Test)
        self.medications = Repository(db, Medication)

    async def _priced_tests(self, test_ids: Sequence[int]) -> list[Test]:
        # Each catalog test is ordered at most once; unknown ids are skipped
        unique_ids = list(dict.fromkeys(test_ids))
        if not unique_ids:
            return []
        found = await self.tests.find_all(Test.test_id.in_(unique_ids))
        missing = set(unique_ids) - {test.test_id for test in found}
        if missing:
            logger.warning("Unknown test ids ignored", test_ids=sorted(missing))
        return found

    async def conduct(
        self, doctor_id: int, appointment_id: int, data: ConsultationCreate
    ) -> ConsultationOutcome:
        """
        Raises:
            NotFoundError: Unknown appointment, another doctor's, or (when
                unknown medications are rejected) a missing medication
            InvalidTransitionError: Appointment is not Scheduled
        """
        log = logger.bind(doctor_id=doctor_id, appointment_id=appointment_id)

        appointment = await self.appointments.get_or_raise(
            appointment_id, Appointment.doctor_id == doctor_id, for_update=True
        )
        ensure_transition(
            "Appointment",
            appointment.status,
            AppointmentStatus.COMPLETED,
            APPOINTMENT_TRANSITIONS,
        )

        record = MedicalRecord(
            appointment_id=appointment.appointment_id,
            doctor_id=doctor_id,
            patient_id=appointment.patient_id,
            symptoms=data.symptoms,
            physical_examination=data.physical_examination,
            treatment_plan=data.treatment_plan,
            follow_up_date=data.follow_up_date,
            total_price=ZERO,
        )
        self.db.add(record)
        await self.db.flush()

        total_tests_price = ZERO
        for test in await self._priced_tests(data.test_ids):
            self.db.add(MedicalRecordTest(record_id=record.record_id, test_id=test.test_id))
            total_tests_price += test.price

        total_medications_price = ZERO
        prescriptions: list[Prescription] = []
        dropped: list[int] = []
        for item in data.prescriptions:
            medication = await self.medications.get(item.medication_id)
            if medication is None:
                if self.config.reject_unknown_medications:
                    raise NotFoundError("Medication", item.medication_id)
                log.warning(
                    "Medication not found, prescription dropped",
                    medication_id=item.medication_id,
                )
                dropped.append(item.medication_id)
                continue

            prescription = Prescription(
                record_id=record.record_id,
                medication_id=medication.medication_id,
                medication_name=medication.medication_name,
                dosage=item.dosage,
                duration_days=item.duration_days,
                quantity=item.quantity,
                total_price=money(medication.price_per_unit * item.quantity),
            )
            self.db.add(prescription)
            prescriptions.append(prescription)
            total_medications_price += prescription.total_price

        total_tests_price = money(total_tests_price)
        total_medications_price = money(total_medications_price)
        consultation_fee = money(data.consultation_fee)
        record.total_price = money(total_tests_price + total_medications_price)

        billing = Billing(
            patient_id=appointment.patient_id,
            doctor_id=doctor_id,
            medical_record_id=record.record_id,
            consultation_fee=consultation_fee,
            total_tests_price=total_tests_price,
            total_medications_price=total_medications_price,
            grand_total=money(
                consultation_fee + total_tests_price + total_medications_price
            ),
            status=BillingStatus.PENDING,
        )
        self.db.add(billing)
        await self.db.flush()

        record.billing_id = billing.billing_id
        for prescription in prescriptions:
            prescription.billing_id = billing.billing_id

        appointment.status = AppointmentStatus.COMPLETED
        await self.db.flush()

        log.info(
            "Consultation completed",
            record_id=record.record_id,
            billing_id=billing.billing_id,
            grand_total=str(billing.grand_total),
        )
        return ConsultationOutcome(
            appointment=appointment,
            record=record,
            billing=billing,
            prescriptions=prescriptions,
            dropped_medication_ids=dropped,
        )


__all__ = ["ConsultationWorkflow", "ConsultationOutcome", "money"]
