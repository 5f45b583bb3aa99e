# clinic/services/v1/read_models.py
"""
Read-side queries shared by the role services.

Relationships are always loaded eagerly here; async sessions cannot lazy
load, and each listing should cost a fixed number of queries.
"""

from typing import Optional

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clinic.db.models import (
    Appointment,
    Billing,
    Doctor,
    MedicalRecord,
    MedicalRecordTest,
    Patient,
)
from clinic.db.schemas import (
    AppointmentWithDoctorResponse,
    AppointmentWithPatientResponse,
    BillingResponse,
    BillingWithNamesResponse,
    MedicalRecordResponse,
    PrescriptionResponse,
    RecordTestResponse,
)

DOCTOR_WITH_SPECIALIZATIONS = (selectinload(Doctor.specializations),)


def to_medical_record_response(
    record: MedicalRecord, appointment_date, doctor_name: str
) -> MedicalRecordResponse:
    return MedicalRecordResponse(
        record_id=record.record_id,
        appointment_id=record.appointment_id,
        appointment_date=appointment_date,
        doctor_id=record.doctor_id,
        doctor_name=doctor_name,
        patient_id=record.patient_id,
        symptoms=record.symptoms,
        physical_examination=record.physical_examination,
        treatment_plan=record.treatment_plan,
        follow_up_date=record.follow_up_date,
        total_price=record.total_price,
        tests=[
            RecordTestResponse(
                test_id=link.test.test_id,
                test_name=link.test.test_name,
                price=link.test.price,
            )
            for link in record.tests
        ],
        prescriptions=[
            PrescriptionResponse.model_validate(p) for p in record.prescriptions
        ],
        billing=(
            BillingResponse.model_validate(record.billing) if record.billing else None
        ),
    )


async def medical_records(
    db: AsyncSession,
    patient_id: int,
    *,
    record_id: Optional[int] = None,
) -> list[MedicalRecordResponse]:
    """A patient's records, newest appointment first."""
    query = (
        select(MedicalRecord, Appointment.appointment_date, Doctor.full_name)
        .join(Appointment, Appointment.appointment_id == MedicalRecord.appointment_id)
        .join(Doctor, Doctor.doctor_id == MedicalRecord.doctor_id)
        .where(MedicalRecord.patient_id == patient_id)
        .options(
            selectinload(MedicalRecord.tests).selectinload(MedicalRecordTest.test),
            selectinload(MedicalRecord.prescriptions),
            selectinload(MedicalRecord.billing),
        )
        .order_by(Appointment.appointment_date.desc())
        .execution_options(logging_token="read_models.medical_records")
    )
    if record_id is not None:
        query = query.where(MedicalRecord.record_id == record_id)

    result = await db.execute(query)
    return [
        to_medical_record_response(record, appointment_date, doctor_name)
        for record, appointment_date, doctor_name in result.all()
    ]


async def billings_with_names(
    db: AsyncSession, *where: ColumnElement[bool]
) -> list[BillingWithNamesResponse]:
    query = (
        select(Billing, Patient.full_name, Doctor.full_name)
        .join(Patient, Patient.patient_id == Billing.patient_id)
        .join(Doctor, Doctor.doctor_id == Billing.doctor_id)
        .where(*where)
        .order_by(Billing.billing_id.desc())
        .execution_options(logging_token="read_models.billings_with_names")
    )
    result = await db.execute(query)
    return [
        BillingWithNamesResponse(
            **BillingResponse.model_validate(billing).model_dump(),
            patient_name=patient_name,
            doctor_name=doctor_name,
        )
        for billing, patient_name, doctor_name in result.all()
    ]


async def appointments_with_doctor(
    db: AsyncSession, *where: ColumnElement[bool]
) -> list[AppointmentWithDoctorResponse]:
    query = (
        select(Appointment, Doctor.full_name, Doctor.designation)
        .join(Doctor, Doctor.doctor_id == Appointment.doctor_id)
        .where(*where)
        .order_by(Appointment.appointment_date.desc())
        .execution_options(logging_token="read_models.appointments_with_doctor")
    )
    result = await db.execute(query)
    return [
        AppointmentWithDoctorResponse.model_validate(
            {
                **_appointment_fields(appointment),
                "doctor_name": doctor_name,
                "doctor_designation": designation,
            }
        )
        for appointment, doctor_name, designation in result.all()
    ]


async def appointments_with_patient(
    db: AsyncSession, *where: ColumnElement[bool]
) -> list[AppointmentWithPatientResponse]:
    query = (
        select(Appointment, Patient.full_name, Patient.contact_number)
        .join(Patient, Patient.patient_id == Appointment.patient_id)
        .where(*where)
        .order_by(Appointment.appointment_date)
        .execution_options(logging_token="read_models.appointments_with_patient")
    )
    result = await db.execute(query)
    return [
        AppointmentWithPatientResponse.model_validate(
            {
                **_appointment_fields(appointment),
                "patient_name": patient_name,
                "patient_contact_number": contact_number,
            }
        )
        for appointment, patient_name, contact_number in result.all()
    ]


def _appointment_fields(appointment: Appointment) -> dict:
    return {
        "appointment_id": appointment.appointment_id,
        "patient_id": appointment.patient_id,
        "doctor_id": appointment.doctor_id,
        "appointment_date": appointment.appointment_date,
        "symptoms": appointment.symptoms,
        "status": appointment.status,
        "created_at": appointment.created_at,
    }


__all__ = [
    "DOCTOR_WITH_SPECIALIZATIONS",
    "medical_records",
    "to_medical_record_response",
    "billings_with_names",
    "appointments_with_doctor",
    "appointments_with_patient",
]
