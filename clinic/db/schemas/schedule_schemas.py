# clinic/db/schemas/schedule_schemas.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from datetime import datetime
from typing import Optional
from ..models import ScheduleStatus
from .common_schemas import UtcDateTime


class ScheduleBase(BaseModel):
    start_date: UtcDateTime
    end_date: UtcDateTime

    @model_validator(mode="after")
    def check_window(self) -> "ScheduleBase":
        if self.start_date >= self.end_date:
            raise ValueError("start_date must be before end_date")
        return self


class ScheduleCreate(ScheduleBase):
    pass


class ScheduleUpdate(ScheduleBase):
    status: Optional[ScheduleStatus] = Field(
        None, description="Optional move to Cancelled or Completed"
    )


class ScheduleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    schedule_id: int
    doctor_id: int
    start_date: datetime
    end_date: datetime
    status: ScheduleStatus


class ScheduleWithDoctorResponse(ScheduleResponse):
    doctor_name: str
