# clinic/services/v1/__init__.py
from .admin_service import AdminService
from .auth_service import AuthService
from .doctor_service import DoctorService
from .patient_service import PatientService
from .user_service import UserService

__all__ = [
    "AdminService",
    "AuthService",
    "DoctorService",
    "PatientService",
    "UserService",
]
