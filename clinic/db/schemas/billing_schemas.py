# clinic/db/schemas/billing_schemas.py
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from decimal import Decimal
from ..models import BillingStatus


class BillingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    billing_id: int
    patient_id: int
    doctor_id: int
    medical_record_id: int
    consultation_fee: Decimal
    total_tests_price: Decimal
    total_medications_price: Decimal
    grand_total: Decimal
    status: BillingStatus
    created_at: datetime


class BillingWithNamesResponse(BillingResponse):
    patient_name: str
    doctor_name: str
