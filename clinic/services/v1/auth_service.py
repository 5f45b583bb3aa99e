# clinic/services/v1/auth_service.py
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from common import get_app_logger
from clinic.db.models import Administrator, Doctor, Patient, Role, User
from clinic.db.schemas import LoginRequest, TokenClaims, TokenResponse
from clinic.domain.errors import AuthenticationError
from clinic.security import Identity, PasswordHasher, TokenService

logger = get_app_logger(__name__)

_PROFILE_BY_ROLE = {
    Role.PATIENT: (Patient, Patient.patient_id),
    Role.DOCTOR: (Doctor, Doctor.doctor_id),
    Role.ADMINISTRATOR: (Administrator, Administrator.admin_id),
}


class AuthService:
    def __init__(self, db: AsyncSession, hasher: PasswordHasher, tokens: TokenService):
        self.db = db
        self.hasher = hasher
        self.tokens = tokens

    async def _find_user(self, username: str) -> User | None:
        query = (
            select(User)
            .where(func.lower(User.username) == username.strip().lower())
            .execution_options(logging_token="AuthService._find_user")
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _profile_id(self, user: User) -> int | None:
        model, id_column = _PROFILE_BY_ROLE[user.role]
        query = (
            select(id_column)
            .where(model.user_id == user.user_id)
            .execution_options(logging_token="AuthService._profile_id")
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def login(self, credentials: LoginRequest) -> TokenResponse:
        """
        Raises:
            AuthenticationError: Unknown username or wrong password
        """
        user = await self._find_user(credentials.username)
        if user is None or not self.hasher.verify(
            credentials.password, user.password_hash
        ):
            logger.warning("Login failed", username=credentials.username)
            raise AuthenticationError("Invalid username or password")

        logger.info("Login succeeded", user_id=user.user_id, role=user.role.value)
        return TokenResponse(
            access_token=self.tokens.create_access_token(user),
            expires_in=self.tokens.expires_in_seconds,
            user_id=user.user_id,
            role=user.role,
        )

    async def resolve_identity(self, claims: TokenClaims) -> Identity:
        """
        Map verified token claims to a live account.

        Raises:
            AuthenticationError: The account was deleted after the token was
                issued, or its role changed
        """
        user = await self.db.get(User, claims.user_id)
        if user is None or user.role is not claims.role:
            raise AuthenticationError("Account is no longer active")

        profile_id = await self._profile_id(user)
        if profile_id is None:
            raise AuthenticationError("Account has no active profile")

        return Identity(
            user_id=user.user_id,
            username=user.username,
            role=user.role,
            profile_id=profile_id,
        )


__all__ = ["AuthService"]
