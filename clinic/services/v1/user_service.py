# clinic/services/v1/user_service.py
from sqlalchemy.ext.asyncio import AsyncSession

from common import get_app_logger
from clinic.db.models import Patient, Role
from clinic.db.schemas import PatientRegister, PatientResponse, UsernameAvailability
from clinic.domain.registration import RegistrationGate
from clinic.security import PasswordHasher

logger = get_app_logger(__name__)


class UserService:
    """Public account operations: no authentication required."""

    def __init__(self, db: AsyncSession, hasher: PasswordHasher):
        self.db = db
        self.registration = RegistrationGate(db, hasher)

    async def check_username(self, username: str) -> UsernameAvailability:
        return UsernameAvailability(
            username=username,
            available=await self.registration.is_username_available(username),
        )

    async def register_patient(self, data: PatientRegister) -> PatientResponse:
        user = await self.registration.create_user(
            data.username, data.password, Role.PATIENT
        )
        patient = Patient(
            user_id=user.user_id,
            **data.model_dump(exclude={"username", "password"}),
        )
        self.db.add(patient)
        await self.db.flush()

        logger.info("Patient registered", patient_id=patient.patient_id)
        return PatientResponse.model_validate(patient)


__all__ = ["UserService"]
