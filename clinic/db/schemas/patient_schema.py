# clinic/db/schemas/patient_schema.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from datetime import date, datetime
from typing import Optional
from .common_schemas import UsernameField, PASSWORD_FIELD


class PatientBase(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    date_of_birth: date
    gender: Optional[str] = Field(None, max_length=20)
    contact_number: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=250)
    medical_history: Optional[str] = Field(None, max_length=4000)


class PatientRegister(PatientBase, UsernameField):
    password: str = PASSWORD_FIELD


class PatientUpdate(BaseModel):
    # Administrator edit: any subset of profile fields
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(None, max_length=20)
    contact_number: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=250)
    medical_history: Optional[str] = Field(None, max_length=4000)


class PersonalInfoUpdate(PatientUpdate):
    """Patient self-service edit; may also change login credentials."""

    username: Optional[str] = Field(
        None, min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$"
    )
    new_password: Optional[str] = Field(None, min_length=8, max_length=72)


class PatientResponse(PatientBase):
    model_config = ConfigDict(from_attributes=True)

    patient_id: int
    patient_code: str
    user_id: Optional[int]
    created_at: datetime


class PatientProfileResponse(PatientResponse):
    username: Optional[str] = None
