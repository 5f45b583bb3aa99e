# clinic/db/schemas/__init__.py
from .common_schemas import OperationResult, UsernameAvailability, UtcDateTime, as_utc
from .auth_schemas import LoginRequest, TokenResponse, TokenClaims
from .patient_schema import (
    PatientRegister,
    PatientUpdate,
    PersonalInfoUpdate,
    PatientResponse,
    PatientProfileResponse,
)
from .doctor_schema import (
    DoctorRegister,
    DoctorUpdate,
    DoctorResponse,
    SpecializationResponse,
)
from .admin_schema import AdministratorRegister, AdministratorResponse
from .appointment_schemas import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
    AppointmentWithDoctorResponse,
    AppointmentWithPatientResponse,
    RescheduleResult,
)
from .schedule_schemas import (
    ScheduleCreate,
    ScheduleUpdate,
    ScheduleResponse,
    ScheduleWithDoctorResponse,
)
from .billing_schemas import BillingResponse, BillingWithNamesResponse
from .catalog_schemas import (
    TestCreate,
    TestUpdate,
    TestResponse,
    MedicationCreate,
    MedicationUpdate,
    MedicationResponse,
)
from .medical_record_schemas import (
    PrescriptionCreate,
    ConsultationCreate,
    ConsultationResponse,
    MedicalRecordUpdate,
    MedicalRecordResponse,
    RecordTestResponse,
    PrescriptionResponse,
    PatientTestDetail,
    PatientPrescriptionDetail,
)

__all__ = [
    "OperationResult",
    "UsernameAvailability",
    "UtcDateTime",
    "as_utc",
    "LoginRequest",
    "TokenResponse",
    "TokenClaims",
    "PatientRegister",
    "PatientUpdate",
    "PersonalInfoUpdate",
    "PatientResponse",
    "PatientProfileResponse",
    "DoctorRegister",
    "DoctorUpdate",
    "DoctorResponse",
    "SpecializationResponse",
    "AdministratorRegister",
    "AdministratorResponse",
    "AppointmentCreate",
    "AppointmentReschedule",
    "AppointmentResponse",
    "AppointmentWithDoctorResponse",
    "AppointmentWithPatientResponse",
    "RescheduleResult",
    "ScheduleCreate",
    "ScheduleUpdate",
    "ScheduleResponse",
    "ScheduleWithDoctorResponse",
    "BillingResponse",
    "BillingWithNamesResponse",
    "TestCreate",
    "TestUpdate",
    "TestResponse",
    "MedicationCreate",
    "MedicationUpdate",
    "MedicationResponse",
    "PrescriptionCreate",
    "ConsultationCreate",
    "ConsultationResponse",
    "MedicalRecordUpdate",
    "MedicalRecordResponse",
    "RecordTestResponse",
    "PrescriptionResponse",
    "PatientTestDetail",
    "PatientPrescriptionDetail",
]
