# clinic/db/models/schedules.py
from __future__ import annotations
from typing import TYPE_CHECKING
from enum import Enum
from sqlalchemy import Integer, DateTime, ForeignKey, Enum as sqlalchemy_enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from .db_base_model import DbBaseModel

if TYPE_CHECKING:
    from .doctor_table import Doctor


class ScheduleStatus(str, Enum):
    SCHEDULED = "Scheduled"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"


class DoctorSchedule(DbBaseModel):
    """A bounded window in which the doctor accepts appointments."""

    __tablename__ = "doctor_schedules"

    schedule_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    doctor_id: Mapped[int] = mapped_column(
        ForeignKey("doctors.doctor_id"),
        nullable=False,
        index=True,
    )
    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    end_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    status: Mapped[ScheduleStatus] = mapped_column(
        sqlalchemy_enum(
            ScheduleStatus,
            name="schedule_status",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=ScheduleStatus.SCHEDULED,
    )

    doctor: Mapped["Doctor"] = relationship("Doctor", back_populates="schedules")


__all__ = ["DoctorSchedule", "ScheduleStatus"]
