# clinic/db/models/appointment_table.py
from __future__ import annotations
from typing import TYPE_CHECKING, Optional
from enum import Enum
from sqlalchemy import Integer, DateTime, ForeignKey, Text, Enum as sqlalchemy_Enum
from sqlalchemy.orm import relationship, Mapped, mapped_column
from datetime import datetime
from .db_base_model import DbBaseModel


class AppointmentStatus(str, Enum):
    REQUESTED = "Requested"  # Booked by the patient, awaiting the doctor
    SCHEDULED = "Scheduled"  # Approved by the doctor
    COMPLETED = "Completed"  # Consultation recorded
    CANCELED = "Canceled"


if TYPE_CHECKING:
    from .patient_table import Patient
    from .doctor_table import Doctor


class Appointment(DbBaseModel):
    __tablename__ = "appointments"

    appointment_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.patient_id"),
        nullable=False,
        index=True,
    )

    doctor_id: Mapped[int] = mapped_column(
        ForeignKey("doctors.doctor_id"),
        nullable=False,
        index=True,
    )

    appointment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    status: Mapped[AppointmentStatus] = mapped_column(
        sqlalchemy_Enum(
            AppointmentStatus,
            name="appointment_status",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=AppointmentStatus.REQUESTED,
    )

    symptoms: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    patient: Mapped["Patient"] = relationship("Patient", back_populates="appointments")
    doctor: Mapped["Doctor"] = relationship("Doctor", back_populates="appointments")


__all__ = ["Appointment", "AppointmentStatus"]
