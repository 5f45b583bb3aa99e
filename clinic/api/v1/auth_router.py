# clinic/api/v1/auth_router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.db import get_db
from clinic.db.schemas import LoginRequest, TokenResponse
from clinic.security import PasswordHasher, TokenService
from clinic.services.v1 import AuthService
from .deps import get_password_hasher, get_token_service

auth_router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


@auth_router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Exchange credentials for a bearer token",
    responses={401: {"description": "Invalid username or password"}},
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    return await AuthService(db, hasher, tokens).login(credentials)


__all__ = ["auth_router"]
