# clinic/db/db_manager.py
"""
Database manager focused on connection management and session handling.
Schema migrations are handled separately via Alembic CLI.

Every service operation runs inside one ``session()`` block, so a workflow
that touches several tables (consultation, registration) commits or rolls
back as a unit.
"""

import ssl as ssl_module
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Any, Optional, Union

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
    AsyncEngine,
)
from sqlalchemy.pool import StaticPool

from common import DatabaseConfig, DatabaseError, get_app_logger
from common.config import DbDriver, SslMode

logger = get_app_logger(__name__)

SQLITE_MEMORY_URL = "sqlite+aiosqlite://"


class DbManager:
    """
    Database connection and session manager.

    Usage:
        # Startup
        db_manager = DbManager.from_config(config.database)
        await db_manager.verify_connection()

        # Runtime
        async with db_manager.session() as session:
            result = await session.execute(...)

        # Shutdown
        await db_manager.dispose()
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        echo: bool = False,
        connect_args: Optional[dict[str, Any]] = None,
    ):
        """
        Args:
            url: Database URL (postgresql+asyncpg:// or sqlite+aiosqlite://)
            pool_size: Number of persistent connections (ignored for sqlite)
            max_overflow: Additional connections beyond pool_size
            pool_timeout: Seconds to wait for connection from pool
            pool_recycle: Recycle connections after N seconds
            pool_pre_ping: Test connections before using
            echo: Log all SQL statements
            connect_args: Driver-specific connection arguments (SSL, etc.)
        """
        self._validate_url(url)
        self._is_sqlite = url.startswith("sqlite")

        self._config: dict[str, Union[str, int]] = {
            "url": url,
            "pool_size": pool_size,
            "max_overflow": max_overflow,
        }

        if self._is_sqlite:
            # One shared connection so an in-memory database outlives sessions
            engine_kwargs: dict[str, Any] = {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False, **(connect_args or {})},
            }
        else:
            engine_kwargs = {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_timeout": pool_timeout,
                "pool_recycle": pool_recycle,
                "pool_pre_ping": pool_pre_ping,
                "connect_args": connect_args or {},
            }

        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        logger.info(
            "DbManager initialized",
            sqlite=self._is_sqlite,
            pool_size=None if self._is_sqlite else pool_size,
        )

    @classmethod
    def from_config(cls, config: DatabaseConfig, **kwargs: Any) -> "DbManager":
        """
        Create DbManager from DatabaseConfig with SSL support.

        Example:
            db_manager = DbManager.from_config(config.database)
        """
        url = config.get_connection_url(include_password=True)
        connect_args = kwargs.pop("connect_args", {})

        if config.driver is DbDriver.ASYNCPG and config.ssl_mode:
            if config.ssl_mode is SslMode.DISABLE:
                connect_args["ssl"] = False
            elif config.requires_ssl():
                ssl_context = ssl_module.create_default_context()
                if config.ssl_ca_path:
                    ssl_context.load_verify_locations(cafile=str(config.ssl_ca_path))
                if config.ssl_cert_path and config.ssl_key_path:
                    ssl_context.load_cert_chain(
                        certfile=str(config.ssl_cert_path),
                        keyfile=str(config.ssl_key_path),
                    )
                if config.ssl_mode is SslMode.VERIFY_FULL:
                    ssl_context.check_hostname = True
                    ssl_context.verify_mode = ssl_module.CERT_REQUIRED
                else:
                    ssl_context.check_hostname = False
                    if config.ssl_mode is SslMode.REQUIRE:
                        ssl_context.verify_mode = ssl_module.CERT_NONE
                connect_args["ssl"] = ssl_context

        return cls(
            url=url,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
            echo=config.echo_sql,
            connect_args=connect_args,
            **kwargs,
        )

    @staticmethod
    def _validate_url(url: str) -> None:
        if not url or not url.startswith(
            ("postgresql+asyncpg://", "sqlite+aiosqlite://")
        ):
            raise ValueError(
                "Invalid database URL. Expected postgresql+asyncpg:// or "
                f"sqlite+aiosqlite://, got: {url[:20]}..."
            )

    async def verify_connection(self) -> None:
        """
        Fails fast if a connection cannot be established.

        Raises:
            ConnectionError: If connection fails
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connection verified")
        except SQLAlchemyError as e:
            logger.error("Database connection failed", error=str(e))
            raise ConnectionError(f"Failed to connect to database: {e}") from e

    async def verify_migrations_current(self) -> Optional[str]:
        """
        Return the applied Alembic revision.

        Raises:
            RuntimeError: If alembic_version table doesn't exist
        """
        async with self.engine.connect() as conn:
            has_table = await conn.run_sync(
                lambda sync_conn: sync_conn.dialect.has_table(
                    sync_conn, "alembic_version"
                )
            )
            if not has_table:
                raise RuntimeError(
                    "alembic_version table not found. "
                    "Have you run 'alembic upgrade head'?"
                )
            result = await conn.execute(text("SELECT version_num FROM alembic_version"))
            current_version = result.scalar()

        logger.info("Current migration version", revision=current_version)
        return current_version

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a transactional database session.

        Commits on success, rolls back on exception. Raw SQLAlchemy faults are
        re-raised as DatabaseError; application errors pass through untouched.
        """
        session = self.session_maker()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error("Session error, rolled back", error=str(e))
            raise DatabaseError("A database error occurred") from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> dict[str, Any]:
        """
        Example:
            {"healthy": True, "response_time_ms": 5.2}
        """
        start = time.perf_counter()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("Database health check failed", error=str(e))
            return {"healthy": False, "error": str(e)}

        return {
            "healthy": True,
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
        }

    async def dispose(self) -> None:
        """Call this on application shutdown."""
        await self.engine.dispose()
        logger.info("Database connections disposed")

    def get_config_snapshot(self) -> dict[str, Any]:
        return self._config.copy()


__all__ = ["DbManager", "SQLITE_MEMORY_URL"]
