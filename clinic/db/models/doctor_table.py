# clinic/db/models/doctor_table.py
from __future__ import annotations
from typing import TYPE_CHECKING, Optional
from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .db_base_model import DbBaseModel

if TYPE_CHECKING:
    from .schedules import DoctorSchedule
    from .appointment_table import Appointment

INACTIVE_DESIGNATION = "Inactive"

doctor_specializations = Table(
    "doctor_specializations",
    DbBaseModel.metadata,
    Column(
        "doctor_id",
        ForeignKey("doctors.doctor_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "specialization_id",
        ForeignKey("specializations.specialization_id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Specialization(DbBaseModel):
    __tablename__ = "specializations"

    specialization_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    specialization_name: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True
    )


class Doctor(DbBaseModel):
    __tablename__ = "doctors"

    doctor_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    doctor_code: Mapped[str] = mapped_column(
        String(12),
        nullable=False,
        default=DbBaseModel.generate_short_code,
        unique=True,
    )

    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )

    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    experience_years: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    qualification: Mapped[Optional[str]] = mapped_column(String(100))
    designation: Mapped[Optional[str]] = mapped_column(String(100))

    specializations: Mapped[list["Specialization"]] = relationship(
        "Specialization", secondary=doctor_specializations
    )

    schedules: Mapped[list["DoctorSchedule"]] = relationship(
        "DoctorSchedule", back_populates="doctor"
    )

    appointments: Mapped[list["Appointment"]] = relationship(
        "Appointment", back_populates="doctor"
    )

    @property
    def is_active(self) -> bool:
        return self.designation != INACTIVE_DESIGNATION


__all__ = [
    "Doctor",
    "Specialization",
    "doctor_specializations",
    "INACTIVE_DESIGNATION",
]
