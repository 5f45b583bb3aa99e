# clinic/db/schemas/appointment_schemas.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional
from ..models import AppointmentStatus
from .common_schemas import UtcDateTime


class AppointmentBase(BaseModel):
    appointment_date: UtcDateTime = Field(..., description="Requested date and time")
    symptoms: Optional[str] = Field(None, max_length=1000)


class AppointmentCreate(AppointmentBase):
    doctor_id: int = Field(..., gt=0)


class AppointmentReschedule(BaseModel):
    new_appointment_date: UtcDateTime = Field(
        ..., description="Must be in the future and inside a Scheduled window"
    )


class AppointmentResponse(AppointmentBase):
    model_config = ConfigDict(from_attributes=True)

    appointment_id: int
    status: AppointmentStatus
    patient_id: int
    doctor_id: int
    created_at: datetime


class AppointmentWithDoctorResponse(AppointmentResponse):
    doctor_name: str
    doctor_designation: Optional[str] = None


class AppointmentWithPatientResponse(AppointmentResponse):
    patient_name: str
    patient_contact_number: Optional[str] = None


class RescheduleResult(BaseModel):
    message: str
    appointment: AppointmentResponse
