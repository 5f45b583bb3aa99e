# clinic/api/v1/user_router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.db import get_db
from clinic.db.schemas import PatientRegister, PatientResponse, UsernameAvailability
from clinic.security import PasswordHasher
from clinic.services.v1 import UserService
from .deps import get_password_hasher

user_router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


@user_router.get(
    "/check-username",
    response_model=UsernameAvailability,
    summary="Check whether a username is free",
)
async def check_username(
    username: str = Query(..., min_length=1, max_length=50),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    return await UserService(db, hasher).check_username(username)


@user_router.post(
    "/register",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a patient account",
    description="""
    Creates the login and the patient profile in one transaction.
    """,
    responses={409: {"description": "Username already taken"}},
)
async def register_patient(
    data: PatientRegister,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    return await UserService(db, hasher).register_patient(data)


__all__ = ["user_router"]
