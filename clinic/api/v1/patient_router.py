# clinic/api/v1/patient_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.db import get_db
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
    PatientTestDetail,
    PersonalInfoUpdate,
    RescheduleResult,
    ScheduleResponse,
)
from clinic.security import Identity, PasswordHasher
from clinic.services.v1 import PatientService
from .deps import get_password_hasher, require_patient

patient_router = APIRouter(
    prefix="/patient",
    tags=["Patient"],
    responses={
        401: {"description": "Missing or invalid token"},
        403: {"description": "Caller is not a patient"},
    },
)


@patient_router.get(
    "/personal-info",
    response_model=PatientProfileResponse,
    summary="Get own profile",
)
async def get_personal_info(
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).get_personal_info(identity.profile_id)


@patient_router.put(
    "/personal-info",
    response_model=PatientProfileResponse,
    summary="Update own profile",
    description="""
    Partial update. Changing the username re-checks availability;
    `new_password` replaces the password.
    """,
    responses={409: {"description": "Username already taken"}},
)
async def update_personal_info(
    data: PersonalInfoUpdate,
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    return await PatientService(db).update_personal_info(
        identity.profile_id, data, hasher
    )


@patient_router.get(
    "/doctors",
    response_model=list[DoctorResponse],
    summary="Search active doctors",
)
async def search_doctors(
    specialization: Optional[str] = Query(None, max_length=100),
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).search_doctors(specialization)


@patient_router.get(
    "/doctors/{doctor_id}/schedule",
    response_model=list[ScheduleResponse],
    summary="A doctor's bookable windows",
    responses={404: {"description": "Doctor not found"}},
)
async def get_doctor_schedule(
    doctor_id: int,
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).get_doctor_schedule(doctor_id)


@patient_router.post(
    "/appointments",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request an appointment",
    description="""
    The date must fall inside one of the doctor's Scheduled windows
    (bounds inclusive). The appointment starts as `Requested`.
    """,
    responses={
        404: {"description": "Doctor not found"},
        409: {"description": "No schedule covers the date"},
    },
)
async def request_appointment(
    data: AppointmentCreate,
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).request_appointment(identity.profile_id, data)


@patient_router.get(
    "/appointments",
    response_model=list[AppointmentWithDoctorResponse],
    summary="List own appointments",
)
async def list_appointments(
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).list_appointments(identity.profile_id)


@patient_router.put(
    "/appointments/{appointment_id}/reschedule",
    response_model=RescheduleResult,
    summary="Move an appointment",
    description="""
    Moves the appointment and resets it to `Requested` for the doctor to
    approve again.
    """,
    responses={
        404: {"description": "Appointment not found"},
        409: {"description": "Closed appointment or no schedule covers the date"},
        422: {"description": "Date is not in the future"},
    },
)
async def reschedule_appointment(
    appointment_id: int,
    data: AppointmentReschedule,
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).reschedule_appointment(
        identity.profile_id, appointment_id, data
    )


@patient_router.post(
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
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).cancel_appointment(
        identity.profile_id, appointment_id
    )


@patient_router.get(
    "/medical-history",
    response_model=list[MedicalRecordResponse],
    summary="Own medical records with tests, prescriptions and bills",
)
async def get_medical_history(
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).get_medical_history(identity.profile_id)


@patient_router.get(
    "/tests",
    response_model=list[PatientTestDetail],
    summary="Tests ordered for the patient",
)
async def get_test_details(
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).get_test_details(identity.profile_id)


@patient_router.get(
    "/prescriptions",
    response_model=list[PatientPrescriptionDetail],
    summary="Prescriptions issued to the patient",
)
async def get_prescription_details(
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).get_prescription_details(identity.profile_id)


@patient_router.get(
    "/bills",
    response_model=list[BillingWithNamesResponse],
    summary="Own bills",
)
async def get_bills(
    identity: Identity = Depends(require_patient),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).get_bills(identity.profile_id)


__all__ = ["patient_router"]
