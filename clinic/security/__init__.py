# clinic/security/__init__.py
from .identity import Identity
from .password_hasher import PasswordHasher
from .token_service import TokenService

__all__ = ["Identity", "PasswordHasher", "TokenService"]
