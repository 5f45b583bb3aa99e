# clinic/db/models/__init__.py
from .db_base_model import DbBaseModel, Money, ZERO, utc_now
from .user_table import User, Role
from .patient_table import Patient
from .doctor_table import (
    Doctor,
    Specialization,
    doctor_specializations,
    INACTIVE_DESIGNATION,
)
from .administrator_table import Administrator
from .appointment_table import Appointment, AppointmentStatus
from .schedules import DoctorSchedule, ScheduleStatus
from .catalog_table import Test, Medication
from .medical_record_table import MedicalRecord, MedicalRecordTest, Prescription
from .billing_table import Billing, BillingStatus

__all__ = [
    "DbBaseModel",
    "Money",
    "ZERO",
    "utc_now",
    "User",
    "Role",
    "Patient",
    "Doctor",
    "Specialization",
    "doctor_specializations",
    "INACTIVE_DESIGNATION",
    "Administrator",
    "Appointment",
    "AppointmentStatus",
    "DoctorSchedule",
    "ScheduleStatus",
    "Test",
    "Medication",
    "MedicalRecord",
    "MedicalRecordTest",
    "Prescription",
    "Billing",
    "BillingStatus",
]
