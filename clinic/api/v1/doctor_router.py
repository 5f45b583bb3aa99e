# clinic/api/v1/doctor_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.db import get_db
from clinic.db.models import AppointmentStatus
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
from clinic.security import Identity
from clinic.services.v1 import DoctorService
from .deps import require_doctor

doctor_router = APIRouter(
    prefix="/doctor",
    tags=["Doctor"],
    responses={
        401: {"description": "Missing or invalid token"},
        403: {"description": "Caller is not a doctor"},
    },
)


@doctor_router.get(
    "/appointments",
    response_model=list[AppointmentWithPatientResponse],
    summary="Own appointments, optionally filtered by status",
)
async def get_appointments(
    appointment_status: Optional[AppointmentStatus] = Query(None, alias="status"),
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).get_appointments(
        identity.profile_id, appointment_status
    )


@doctor_router.put(
    "/appointments/{appointment_id}/approve",
    response_model=AppointmentResponse,
    summary="Approve a requested appointment",
    responses={
        404: {"description": "Appointment not found"},
        409: {"description": "Appointment is not Requested"},
    },
)
async def approve_appointment(
    appointment_id: int,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).approve_appointment(
        identity.profile_id, appointment_id
    )


@doctor_router.put(
    "/appointments/{appointment_id}/cancel",
    response_model=OperationResult,
    summary="Cancel an appointment",
    responses={
        404: {"description": "Appointment not found"},
        409: {"description": "Already canceled or completed"},
    },
)
async def cancel_appointment(
    appointment_id: int,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).cancel_appointment(
        identity.profile_id, appointment_id
    )


@doctor_router.put(
    "/appointments/{appointment_id}/reschedule",
    response_model=RescheduleResult,
    summary="Move an appointment; status is kept",
)
async def reschedule_appointment(
    appointment_id: int,
    data: AppointmentReschedule,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).reschedule_appointment(
        identity.profile_id, appointment_id, data
    )


@doctor_router.post(
    "/appointments/{appointment_id}/consult",
    response_model=ConsultationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a consultation",
    description="""
    Creates the medical record, ordered tests, prescriptions and a Pending
    bill, and completes the appointment, all in one transaction.

    **Database Impact:** one row lock on the appointment; one catalog query
    for tests and one per prescribed medication.
    """,
    responses={
        404: {"description": "Appointment not found"},
        409: {"description": "Appointment is not Scheduled"},
    },
)
async def conduct_consultation(
    appointment_id: int,
    data: ConsultationCreate,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).conduct_consultation(
        identity.profile_id, appointment_id, data
    )


@doctor_router.get(
    "/patients/{patient_id}/medical-records",
    response_model=list[MedicalRecordResponse],
    summary="A patient's medical records",
    responses={404: {"description": "No records for this patient"}},
)
async def get_patient_records(
    patient_id: int,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).get_patient_records(patient_id)


@doctor_router.put(
    "/patients/{patient_id}/medical-records/{record_id}",
    response_model=MedicalRecordResponse,
    summary="Edit clinical fields of an own record",
    responses={404: {"description": "Record not found"}},
)
async def update_medical_record(
    patient_id: int,
    record_id: int,
    data: MedicalRecordUpdate,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).update_medical_record(
        identity.profile_id, record_id, patient_id, data
    )


@doctor_router.put(
    "/bills/{billing_id}/pay",
    response_model=BillingResponse,
    summary="Mark an own bill as paid",
    responses={
        404: {"description": "Bill not found"},
        409: {"description": "Bill already paid"},
    },
)
async def mark_bill_paid(
    billing_id: int,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).mark_bill_paid(identity.profile_id, billing_id)


@doctor_router.get(
    "/bills",
    response_model=list[BillingWithNamesResponse],
    summary="Bills issued by the doctor",
)
async def get_bills(
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).get_bills(identity.profile_id)


@doctor_router.get("/tests", response_model=list[TestResponse], summary="Test catalog")
async def list_tests(
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).list_tests()


@doctor_router.get(
    "/medications",
    response_model=list[MedicationResponse],
    summary="Medication catalog",
)
async def list_medications(
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).list_medications()


@doctor_router.post(
    "/schedules",
    response_model=ScheduleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open an availability window",
    responses={409: {"description": "Overlaps an existing window"}},
)
async def create_schedule(
    data: ScheduleCreate,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).create_schedule(identity.profile_id, data)


@doctor_router.get(
    "/schedules",
    response_model=list[ScheduleResponse],
    summary="All own windows",
)
async def list_schedules(
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).list_schedules(identity.profile_id)


@doctor_router.put(
    "/schedules/{schedule_id}",
    response_model=ScheduleResponse,
    summary="Move a live window",
    responses={
        404: {"description": "Schedule not found"},
        409: {"description": "Schedule is closed or overlaps"},
    },
)
async def update_schedule(
    schedule_id: int,
    data: ScheduleUpdate,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).update_schedule(
        identity.profile_id, schedule_id, data
    )


@doctor_router.put(
    "/schedules/{schedule_id}/cancel",
    response_model=ScheduleResponse,
    summary="Cancel a window",
    responses={409: {"description": "Schedule already closed"}},
)
async def cancel_schedule(
    schedule_id: int,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).cancel_schedule(identity.profile_id, schedule_id)


@doctor_router.put(
    "/schedules/{schedule_id}/complete",
    response_model=ScheduleResponse,
    summary="Mark a window completed",
    responses={409: {"description": "Schedule already closed"}},
)
async def complete_schedule(
    schedule_id: int,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    return await DoctorService(db).complete_schedule(identity.profile_id, schedule_id)


__all__ = ["doctor_router"]
