# clinic/api/v1/admin_router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.db import get_db
from clinic.db.schemas import (
    AdministratorRegister,
    AdministratorResponse,
    AppointmentReschedule,
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
from clinic.security import Identity, PasswordHasher
from clinic.services.v1 import AdminService
from .deps import get_password_hasher, require_admin

admin_router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={
        401: {"description": "Missing or invalid token"},
        403: {"description": "Caller is not an administrator"},
    },
)


def _service(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AdminService:
    return AdminService(db, hasher)


# Accounts


@admin_router.get(
    "/check-username",
    response_model=UsernameAvailability,
    summary="Check whether a username is free",
)
async def check_username(
    username: str = Query(..., min_length=1, max_length=50),
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.check_username(username)


@admin_router.post(
    "/administrators",
    response_model=AdministratorResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an administrator",
    responses={409: {"description": "Username already taken"}},
)
async def register_admin(
    data: AdministratorRegister,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.register_admin(data)


@admin_router.post(
    "/doctors",
    response_model=DoctorResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a doctor",
    responses={
        404: {"description": "Unknown specialization"},
        409: {"description": "Username already taken"},
    },
)
async def register_doctor(
    data: DoctorRegister,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.register_doctor(data)


@admin_router.get(
    "/specializations",
    response_model=list[SpecializationResponse],
    summary="Specialization catalog",
)
async def list_specializations(
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.list_specializations()


# Doctors


@admin_router.get("/doctors/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(
    doctor_id: int,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.get_doctor(doctor_id)


@admin_router.put(
    "/doctors/{doctor_id}",
    response_model=DoctorResponse,
    summary="Update a doctor",
    description="""
    Partial update. `specialization_ids`, when present, replaces the
    doctor's specializations.
    """,
)
async def update_doctor(
    doctor_id: int,
    data: DoctorUpdate,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.update_doctor(doctor_id, data)


@admin_router.delete(
    "/doctors/{doctor_id}",
    response_model=OperationResult,
    summary="Delete a doctor's account",
    description="""
    Deletes the login, marks the profile `Inactive` and cancels its open
    appointments. Records and bills are kept.
    """,
)
async def delete_doctor(
    doctor_id: int,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.delete_doctor(doctor_id)


@admin_router.get(
    "/doctors/{doctor_id}/schedules",
    response_model=list[ScheduleWithDoctorResponse],
    summary="A doctor's windows with the doctor's name",
)
async def get_doctor_schedules(
    doctor_id: int,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.get_doctor_schedules(doctor_id)


# Patients


@admin_router.get("/patients/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: int,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.get_patient(patient_id)


@admin_router.put("/patients/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: int,
    data: PatientUpdate,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.update_patient(patient_id, data)


@admin_router.delete(
    "/patients/{patient_id}",
    response_model=OperationResult,
    summary="Delete a patient's account",
)
async def delete_patient(
    patient_id: int,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.delete_patient(patient_id)


# Appointments


@admin_router.get(
    "/appointments/{appointment_id}",
    response_model=AppointmentWithDoctorResponse,
)
async def view_appointment(
    appointment_id: int,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.view_appointment(appointment_id)


@admin_router.put(
    "/appointments/{appointment_id}/reschedule",
    response_model=RescheduleResult,
    summary="Move an appointment; status is kept",
)
async def reschedule_appointment(
    appointment_id: int,
    data: AppointmentReschedule,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.reschedule_appointment(appointment_id, data)


@admin_router.put(
    "/appointments/{appointment_id}/cancel",
    response_model=OperationResult,
)
async def cancel_appointment(
    appointment_id: int,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.cancel_appointment(appointment_id)


# Schedules


@admin_router.put("/schedules/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    data: ScheduleUpdate,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.update_schedule(schedule_id, data)


@admin_router.put("/schedules/{schedule_id}/cancel", response_model=ScheduleResponse)
async def cancel_schedule(
    schedule_id: int,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.cancel_schedule(schedule_id)


@admin_router.put(
    "/schedules/{schedule_id}/complete", response_model=ScheduleResponse
)
async def complete_schedule(
    schedule_id: int,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.complete_schedule(schedule_id)


# Billing


@admin_router.get(
    "/bills",
    response_model=list[BillingWithNamesResponse],
    summary="All bills with patient and doctor names",
)
async def list_bills(
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.list_bills()


@admin_router.put("/bills/{billing_id}/pay", response_model=BillingResponse)
async def mark_bill_paid(
    billing_id: int,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.mark_bill_paid(billing_id)


# Catalog


@admin_router.get("/tests", response_model=list[TestResponse])
async def list_tests(
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.list_tests()


@admin_router.post(
    "/tests", response_model=TestResponse, status_code=status.HTTP_201_CREATED
)
async def add_test(
    data: TestCreate,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.add_test(data)


@admin_router.put("/tests/{test_id}", response_model=TestResponse)
async def update_test(
    test_id: int,
    data: TestUpdate,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.update_test(test_id, data)


@admin_router.get("/medications", response_model=list[MedicationResponse])
async def list_medications(
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.list_medications()


@admin_router.post(
    "/medications",
    response_model=MedicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_medication(
    data: MedicationCreate,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.add_medication(data)


@admin_router.put("/medications/{medication_id}", response_model=MedicationResponse)
async def update_medication(
    medication_id: int,
    data: MedicationUpdate,
    identity: Identity = Depends(require_admin),
    service: AdminService = Depends(_service),
):
    return await service.update_medication(medication_id, data)


__all__ = ["admin_router"]
