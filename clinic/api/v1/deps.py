# clinic/api/v1/deps.py
"""
Request-scoped dependencies: credentials, the caller's identity, role guards.
"""

from typing import Awaitable, Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from common import get_config
from clinic.db import get_db
from clinic.db.models import Role
from clinic.domain.errors import AuthenticationError, AuthorizationError
from clinic.security import Identity, PasswordHasher, TokenService
from clinic.services.v1 import AuthService

bearer_scheme = HTTPBearer(auto_error=False, description="Token from /auth/login")


def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=get_config().auth.bcrypt_rounds)


def get_token_service() -> TokenService:
    return TokenService(get_config().auth)


async def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> Identity:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Missing bearer token")
    claims = tokens.decode_token(credentials.credentials)
    return await AuthService(db, hasher, tokens).resolve_identity(claims)


def require_role(*roles: Role) -> Callable[..., Awaitable[Identity]]:
    """
    Usage:
        identity: Identity = Depends(require_role(Role.DOCTOR))
    """
    allowed = frozenset(roles)

    async def _guard(identity: Identity = Depends(get_identity)) -> Identity:
        if identity.role not in allowed:
            raise AuthorizationError(
                f"This operation requires role: {', '.join(sorted(r.value for r in allowed))}"
            )
        return identity

    return _guard


require_patient = require_role(Role.PATIENT)
require_doctor = require_role(Role.DOCTOR)
require_admin = require_role(Role.ADMINISTRATOR)

__all__ = [
    "bearer_scheme",
    "get_password_hasher",
    "get_token_service",
    "get_identity",
    "require_role",
    "require_patient",
    "require_doctor",
    "require_admin",
]
