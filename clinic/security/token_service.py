# clinic/security/token_service.py
"""
Signed bearer tokens.

Claims: ``sub`` (user id), ``username``, ``role``, ``iss``, ``aud``, ``iat``,
``exp``. The profile id is not embedded; it is resolved per request so a
deleted profile stops authorizing immediately.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from pydantic import ValidationError

from common import AuthConfig
from clinic.db.models import User
from clinic.db.schemas import TokenClaims
from clinic.domain.errors import AuthenticationError


class TokenService:
    def __init__(self, config: AuthConfig):
        self.config = config
        self._secret = config.secret_key.get_secret_value()

    @property
    def expires_in_seconds(self) -> int:
        return self.config.access_token_expire_minutes * 60

    def create_access_token(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.user_id),
            "username": user.username,
            "role": user.role.value,
            "iss": self.config.issuer,
            "aud": self.config.audience,
            "iat": now,
            "exp": now + timedelta(minutes=self.config.access_token_expire_minutes),
        }
        return jwt.encode(payload, self._secret, algorithm=self.config.algorithm)

    def decode_token(self, token: str) -> TokenClaims:
        """
        Raises:
            AuthenticationError: Bad signature, expired, wrong audience or
                issuer, or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.config.algorithm],
                audience=self.config.audience,
                issuer=self.config.issuer,
            )
            return TokenClaims.model_validate(payload)
        except (JWTError, ValidationError) as e:
            raise AuthenticationError("Invalid or expired token") from e


__all__ = ["TokenService"]
