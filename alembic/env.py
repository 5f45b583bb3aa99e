"""
Alembic environment configuration.
Uses the same DatabaseConfig as the application for consistency.
"""

import os
import sys
from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context
from dotenv import load_dotenv

# Add project to path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from clinic.db.models import DbBaseModel
from common.config import DbDriver, SslMode
from common.config.initialize_config import get_config, initialize_config
from common.api_error import ConfigurationError

load_dotenv()
try:
    initialize_config()
except ConfigurationError as e:
    # Can't use logger yet, but that's OK - this is a fatal startup error
    print(f"FATAL: Configuration error:\n{e}")
    sys.exit(1)

# Alembic Config object
config = context.config

app_config = get_config()

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = DbBaseModel.metadata


def _db_config():
    if not app_config.database:
        raise RuntimeError("Database configuration not found in environment")
    return app_config.database


def is_sqlite() -> bool:
    return _db_config().driver is DbDriver.AIOSQLITE


def get_sync_url() -> str:
    """
    Alembic runs synchronously: asyncpg -> psycopg2, aiosqlite -> sqlite.
    """
    db_config = _db_config()

    if db_config.driver is DbDriver.AIOSQLITE:
        return f"sqlite:///{db_config.name}"

    driver = "postgresql"  # psycopg2
    host = f"{db_config.host}:{db_config.port}/{db_config.name}"
    if db_config.username and db_config.password:
        password = db_config.password.get_secret_value()
        return f"{driver}://{db_config.username}:{password}@{host}"
    if db_config.username:
        return f"{driver}://{db_config.username}@{host}"
    return f"{driver}://{host}"


def get_connect_args() -> dict:
    """Same SSL settings as the application, in psycopg2 spelling."""
    db_config = _db_config()
    connect_args = {}

    if db_config.ssl_mode and not is_sqlite():
        connect_args["sslmode"] = db_config.ssl_mode.value
        if db_config.ssl_mode is not SslMode.DISABLE:
            if db_config.ssl_ca_path:
                connect_args["sslrootcert"] = str(db_config.ssl_ca_path)
            if db_config.ssl_cert_path:
                connect_args["sslcert"] = str(db_config.ssl_cert_path)
            if db_config.ssl_key_path:
                connect_args["sslkey"] = str(db_config.ssl_key_path)

    return connect_args


def run_migrations_offline() -> None:
    """Emit SQL to script output instead of executing it."""
    context.configure(
        url=get_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=is_sqlite(),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_sync_url()

    # NullPool: migrations hold one short-lived connection
    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        connect_args=get_connect_args(),
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=is_sqlite(),
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
