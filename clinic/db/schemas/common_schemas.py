# clinic/db/schemas/common_schemas.py
from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are read as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]


class OperationResult(BaseModel):
    """Acknowledgement for state changes that have nothing else to return."""

    success: bool = True
    message: str


class UsernameAvailability(BaseModel):
    username: str
    available: bool


class UsernameField(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")


# bcrypt only looks at the first 72 bytes
PASSWORD_FIELD = Field(..., min_length=8, max_length=72)
