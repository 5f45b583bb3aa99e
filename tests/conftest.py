"""
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database built from the model
metadata, so no migrations or external services are needed.
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

# main.py reads configuration at import time, so the test environment has to
# be in place before anything from the project is imported.
os.environ["APP_TITLE"] = "Clinic API (test)"
os.environ["APP_VERSION"] = "1.0.0"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-enough-length"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("DB_HOST", None)

from common import AppConfig, ClinicConfig, initialize_config  # noqa: E402
from clinic.db import SQLITE_MEMORY_URL, DbManager  # noqa: E402
from clinic.db.models import DbBaseModel  # noqa: E402
from clinic.security import PasswordHasher, TokenService  # noqa: E402


# ============================================================================
# CONFIGURATION
# ============================================================================


@pytest.fixture(scope="session")
def app_config() -> AppConfig:
    return initialize_config()


@pytest.fixture
def clinic_config() -> ClinicConfig:
    """Legacy-compatible rules: overlaps allowed, unknown medications dropped."""
    return ClinicConfig()


@pytest.fixture
def strict_config() -> ClinicConfig:
    return ClinicConfig(
        reject_overlapping_schedules=True,
        reject_unknown_medications=True,
    )


@pytest.fixture
def hasher(app_config: AppConfig) -> PasswordHasher:
    return PasswordHasher(rounds=app_config.auth.bcrypt_rounds)


@pytest.fixture
def token_service(app_config: AppConfig) -> TokenService:
    return TokenService(app_config.auth)


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def db_manager(app_config: AppConfig) -> AsyncGenerator[DbManager, None]:
    manager = DbManager(SQLITE_MEMORY_URL)
    async with manager.engine.begin() as conn:
        await conn.run_sync(DbBaseModel.metadata.create_all)
    yield manager
    await manager.dispose()


@pytest_asyncio.fixture
async def db_session(db_manager: DbManager) -> AsyncGenerator[AsyncSession, None]:
    """One unit of work for the whole test."""
    async with db_manager.session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


# ============================================================================
# API CLIENT
# ============================================================================


@pytest_asyncio.fixture
async def api_client(
    app_config: AppConfig, db_manager: DbManager
) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client bound to the ASGI app.

    ASGITransport does not run the lifespan, so the in-memory manager is
    attached to app.state directly.
    """
    from main import create_app

    app = create_app(app_config)
    app.state.db_manager = db_manager
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
