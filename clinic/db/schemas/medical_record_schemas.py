# clinic/db/schemas/medical_record_schemas.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from ..models import AppointmentStatus
from .billing_schemas import BillingResponse


class PrescriptionCreate(BaseModel):
    medication_id: int = Field(..., gt=0)
    dosage: str = Field(..., min_length=1, max_length=100)
    duration_days: int = Field(..., gt=0, le=365)
    quantity: int = Field(..., gt=0, le=10000)


class ConsultationCreate(BaseModel):
    symptoms: Optional[str] = Field(None, max_length=4000)
    physical_examination: Optional[str] = Field(None, max_length=4000)
    treatment_plan: Optional[str] = Field(None, max_length=4000)
    follow_up_date: Optional[datetime] = None
    test_ids: List[int] = Field(default_factory=list)
    prescriptions: List[PrescriptionCreate] = Field(default_factory=list)
    consultation_fee: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class MedicalRecordUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""

    symptoms: Optional[str] = Field(None, max_length=4000)
    physical_examination: Optional[str] = Field(None, max_length=4000)
    treatment_plan: Optional[str] = Field(None, max_length=4000)
    follow_up_date: Optional[datetime] = None


class RecordTestResponse(BaseModel):
    test_id: int
    test_name: str
    price: Decimal


class PrescriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    prescription_id: int
    record_id: int
    medication_id: int
    medication_name: str
    dosage: str
    duration_days: int
    quantity: int
    total_price: Decimal
    billing_id: Optional[int]


class MedicalRecordResponse(BaseModel):
    record_id: int
    appointment_id: int
    appointment_date: datetime
    doctor_id: int
    doctor_name: str
    patient_id: int
    symptoms: Optional[str]
    physical_examination: Optional[str]
    treatment_plan: Optional[str]
    follow_up_date: Optional[datetime]
    total_price: Decimal
    tests: List[RecordTestResponse] = Field(default_factory=list)
    prescriptions: List[PrescriptionResponse] = Field(default_factory=list)
    billing: Optional[BillingResponse] = None


class ConsultationResponse(BaseModel):
    record_id: int
    appointment_id: int
    appointment_status: AppointmentStatus
    billing: BillingResponse
    dropped_medication_ids: List[int] = Field(default_factory=list)


class PatientTestDetail(BaseModel):
    appointment_id: int
    doctor_name: str
    test_id: int
    test_name: str
    price: Decimal


class PatientPrescriptionDetail(BaseModel):
    appointment_id: int
    doctor_name: str
    medication_name: str
    dosage: str
    duration_days: int
    quantity: int
    total_price: Decimal
