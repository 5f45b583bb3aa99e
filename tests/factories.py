"""Row builders for tests. Each helper flushes so generated ids are set."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from clinic.db.models import (
    Doctor,
    DoctorSchedule,
    Medication,
    Patient,
    Role,
    ScheduleStatus,
    Specialization,
    Test,
    User,
)


async def make_patient(
    session: AsyncSession, full_name: str = "Jane Roe", **overrides
) -> Patient:
    values = {
        "full_name": full_name,
        "email": "jane.roe@clinic.org",
        "date_of_birth": date(1990, 4, 12),
        "gender": "Female",
        **overrides,
    }
    patient = Patient(**values)
    session.add(patient)
    await session.flush()
    return patient


async def make_doctor(
    session: AsyncSession, full_name: str = "Dr. John Smith", **overrides
) -> Doctor:
    values = {
        "full_name": full_name,
        "email": "john.smith@clinic.org",
        "experience_years": 10,
        "qualification": "MD",
        "designation": "Consultant",
        **overrides,
    }
    doctor = Doctor(**values)
    session.add(doctor)
    await session.flush()
    return doctor


async def make_schedule(
    session: AsyncSession,
    doctor: Doctor,
    start_date: datetime,
    end_date: datetime,
    status: ScheduleStatus = ScheduleStatus.SCHEDULED,
) -> DoctorSchedule:
    schedule = DoctorSchedule(
        doctor_id=doctor.doctor_id,
        start_date=start_date,
        end_date=end_date,
        status=status,
    )
    session.add(schedule)
    await session.flush()
    return schedule


async def make_test(session: AsyncSession, name: str, price: str) -> Test:
    test = Test(test_name=name, price=Decimal(price))
    session.add(test)
    await session.flush()
    return test


async def make_medication(session: AsyncSession, name: str, price: str) -> Medication:
    medication = Medication(medication_name=name, price_per_unit=Decimal(price))
    session.add(medication)
    await session.flush()
    return medication


async def make_specialization(session: AsyncSession, name: str) -> Specialization:
    specialization = Specialization(specialization_name=name)
    session.add(specialization)
    await session.flush()
    return specialization


async def make_user(
    session: AsyncSession, username: str, role: Role = Role.DOCTOR
) -> User:
    # Hash is never verified by callers of this helper
    user = User(username=username, password_hash="not-a-bcrypt-hash", role=role)
    session.add(user)
    await session.flush()
    return user
