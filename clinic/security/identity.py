# clinic/security/identity.py
from dataclasses import dataclass
from typing import Optional

from clinic.db.models import Role


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, resolved once per request."""

    user_id: int
    username: str
    role: Role
    # patient_id, doctor_id or admin_id depending on role
    profile_id: Optional[int]

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMINISTRATOR


__all__ = ["Identity"]
