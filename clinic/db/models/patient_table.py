# clinic/db/models/patient_table.py
from __future__ import annotations
from datetime import date
from typing import TYPE_CHECKING, Optional
from sqlalchemy import Integer, String, Date, ForeignKey, Text
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .db_base_model import DbBaseModel

if TYPE_CHECKING:
    from .appointment_table import Appointment


class Patient(DbBaseModel):
    __tablename__ = "patients"

    patient_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    patient_code: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        unique=True,
        default=DbBaseModel.generate_short_code,
    )

    # NULL once an administrator deletes the login; history is kept
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )

    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[Optional[str]] = mapped_column(String(20))
    contact_number: Mapped[Optional[str]] = mapped_column(String(20))
    address: Mapped[Optional[str]] = mapped_column(String(250))
    medical_history: Mapped[Optional[str]] = mapped_column(Text)

    appointments: Mapped[list["Appointment"]] = relationship(
        "Appointment", back_populates="patient"
    )


__all__ = ["Patient"]
