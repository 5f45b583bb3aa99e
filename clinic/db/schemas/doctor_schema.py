# clinic/db/schemas/doctor_schema.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from datetime import datetime
from typing import Optional, List
from .common_schemas import UsernameField, PASSWORD_FIELD


class SpecializationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    specialization_id: int
    specialization_name: str


class DoctorBase(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    experience_years: int = Field(0, ge=0, le=80)
    qualification: Optional[str] = Field(None, max_length=100)
    designation: Optional[str] = Field(None, max_length=100)


class DoctorRegister(DoctorBase, UsernameField):
    password: str = PASSWORD_FIELD
    specialization_ids: List[int] = Field(default_factory=list)


class DoctorUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    experience_years: Optional[int] = Field(None, ge=0, le=80)
    qualification: Optional[str] = Field(None, max_length=100)
    designation: Optional[str] = Field(None, max_length=100)
    # When given, replaces the doctor's specializations wholesale
    specialization_ids: Optional[List[int]] = None


class DoctorResponse(DoctorBase):
    model_config = ConfigDict(from_attributes=True)

    doctor_id: int
    doctor_code: str
    user_id: Optional[int]
    is_active: bool
    specializations: List[SpecializationResponse] = Field(default_factory=list)
    created_at: datetime
