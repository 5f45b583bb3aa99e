# clinic/api/v1/__init__.py
from .admin_router import admin_router
from .auth_router import auth_router
from .doctor_router import doctor_router
from .patient_router import patient_router
from .user_router import user_router

__all__ = [
    "admin_router",
    "auth_router",
    "doctor_router",
    "patient_router",
    "user_router",
]
