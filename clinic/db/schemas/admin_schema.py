# clinic/db/schemas/admin_schema.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import Optional
from .common_schemas import UsernameField, PASSWORD_FIELD


class AdministratorRegister(UsernameField):
    full_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = PASSWORD_FIELD


class AdministratorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    admin_id: int
    user_id: Optional[int]
    full_name: str
    email: str
