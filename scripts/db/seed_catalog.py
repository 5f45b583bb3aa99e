# scripts/db/seed_catalog.py
from typing import Any

from sqlalchemy import select

from clinic.db import DbManager
from clinic.db.models import Administrator, Medication, Role, Specialization, Test
from clinic.domain.registration import RegistrationGate
from clinic.security import PasswordHasher
from common.logger import get_app_logger

logger = get_app_logger(__name__)

# table -> (model, natural key column)
MODEL_MAP = {
    "specializations": (Specialization, "specialization_name"),
    "tests": (Test, "test_name"),
    "medications": (Medication, "medication_name"),
}


async def seed_catalog(
    db_manager: DbManager,
    data_template: dict[str, list[dict[str, Any]]],
) -> dict[str, int]:
    """
    Insert catalog rows whose natural key is not present yet.

    Safe to re-run: existing rows are left untouched.

    Returns:
        Dict mapping table names to the number of rows inserted
    """
    inserted: dict[str, int] = {}

    async with db_manager.session() as session:
        for table, rows in data_template.items():
            model_cls, key = MODEL_MAP[table]
            key_column = getattr(model_cls, key)

            result = await session.execute(select(key_column))
            existing = set(result.scalars().all())

            new_rows = [model_cls(**row) for row in rows if row[key] not in existing]
            session.add_all(new_rows)
            inserted[table] = len(new_rows)
            logger.info("Catalog seeded", table=table, inserted=len(new_rows))

    return inserted


async def bootstrap_admin(
    db_manager: DbManager,
    hasher: PasswordHasher,
    *,
    username: str,
    password: str,
    full_name: str,
    email: str,
) -> int:
    """
    Create the first administrator so the admin API becomes reachable.

    Returns:
        The new admin_id

    Raises:
        AlreadyTakenError: If the username exists
    """
    async with db_manager.session() as session:
        user = await RegistrationGate(session, hasher).create_user(
            username, password, Role.ADMINISTRATOR
        )
        admin = Administrator(user_id=user.user_id, full_name=full_name, email=email)
        session.add(admin)
        await session.flush()
        logger.info("Administrator bootstrapped", admin_id=admin.admin_id)
        return admin.admin_id


__all__ = ["seed_catalog", "bootstrap_admin", "MODEL_MAP"]
