import pytest
from sqlalchemy import text

from common import DatabaseError
from clinic.db import DbManager
from clinic.db.models import Role, User
from scripts.db import DEFAULT_DATA_TEMPLATE, TEST_TEMPLATE, seed_catalog


class TestDbManager:
    def test_rejects_unknown_driver(self, app_config):
        with pytest.raises(ValueError):
            DbManager("mysql://localhost/clinic")

    @pytest.mark.asyncio
    async def test_health_check(self, db_manager):
        health = await db_manager.health_check()

        assert health["healthy"] is True
        assert health["response_time_ms"] >= 0

    @pytest.mark.asyncio
    async def test_missing_alembic_table(self, db_manager):
        with pytest.raises(RuntimeError, match="alembic upgrade head"):
            await db_manager.verify_migrations_current()

    @pytest.mark.asyncio
    async def test_reports_applied_revision(self, db_manager):
        async with db_manager.engine.begin() as conn:
            await conn.execute(
                text("CREATE TABLE alembic_version (version_num VARCHAR(32) NOT NULL)")
            )
            await conn.execute(
                text("INSERT INTO alembic_version (version_num) VALUES ('0001_initial')")
            )

        assert await db_manager.verify_migrations_current() == "0001_initial"

    @pytest.mark.asyncio
    async def test_constraint_violation_becomes_database_error(self, db_manager):
        with pytest.raises(DatabaseError):
            async with db_manager.session() as session:
                session.add(User(username="dup", password_hash="x", role=Role.PATIENT))
                session.add(User(username="dup", password_hash="y", role=Role.DOCTOR))

        async with db_manager.session() as session:
            count = await session.scalar(text("SELECT COUNT(*) FROM users"))
        assert count == 0


class TestSeedCatalog:
    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, db_manager):
        first = await seed_catalog(db_manager, DEFAULT_DATA_TEMPLATE)
        second = await seed_catalog(db_manager, DEFAULT_DATA_TEMPLATE)

        assert first["tests"] == len(TEST_TEMPLATE)
        assert second == {"specializations": 0, "tests": 0, "medications": 0}
