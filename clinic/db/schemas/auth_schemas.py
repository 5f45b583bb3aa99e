# clinic/db/schemas/auth_schemas.py
from pydantic import BaseModel, Field
from ..models import Role


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=72)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Lifetime in seconds")
    user_id: int
    role: Role


class TokenClaims(BaseModel):
    sub: str
    username: str
    role: Role

    @property
    def user_id(self) -> int:
        return int(self.sub)
