# clinic/db/models/user_table.py
from __future__ import annotations
from enum import Enum
from sqlalchemy import Integer, String, Enum as sqlalchemy_Enum
from sqlalchemy.orm import Mapped, mapped_column
from .db_base_model import DbBaseModel


class Role(str, Enum):
    """Replaces the legacy numeric role ids 1/2/3."""

    PATIENT = "Patient"
    DOCTOR = "Doctor"
    ADMINISTRATOR = "Administrator"


class User(DbBaseModel):
    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )

    password_hash: Mapped[str] = mapped_column(String(100), nullable=False)

    role: Mapped[Role] = mapped_column(
        sqlalchemy_Enum(
            Role,
            name="user_role",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
    )


__all__ = ["User", "Role"]
