# clinic/domain/registration.py
"""
Username gate shared by every registration flow.

Registration stages the User and its role profile on one session, so both
rows commit together or not at all.
"""

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from common import get_app_logger
from clinic.db.models import Role, User
from clinic.db.repositories import Repository
from clinic.security import PasswordHasher
from .errors import AlreadyTakenError

logger = get_app_logger(__name__)


class RegistrationGate:
    def __init__(self, db: AsyncSession, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher
        self.users = Repository(db, User)

    async def is_username_available(self, username: str) -> bool:
        # Case-insensitive so "Alice" and "alice" cannot coexist
        return not await self.users.exists(
            func.lower(User.username) == username.strip().lower()
        )

    async def ensure_username_available(self, username: str) -> None:
        if not await self.is_username_available(username):
            raise AlreadyTakenError(f"Username '{username}' is already taken")

    async def create_user(self, username: str, password: str, role: Role) -> User:
        """
        Raises:
            AlreadyTakenError: If the username exists, including a race lost
                at insert time
        """
        await self.ensure_username_available(username)
        user = User(
            username=username.strip(),
            password_hash=self.hasher.hash(password),
            role=role,
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError as e:
            raise AlreadyTakenError(f"Username '{username}' is already taken") from e

        logger.info("User registered", user_id=user.user_id, role=role.value)
        return user


__all__ = ["RegistrationGate"]
