# seed_db.py
"""
Database Seeding Script
=======================

Command-line utilities to prepare a fresh database:

- `catalog`: Insert specializations, laboratory tests and medications.
- `admin`: Create the first administrator account.

Usage:
    python seed_db.py catalog
    python seed_db.py admin --username root --full-name "Clinic Admin" \
        --email admin@clinic.example

The admin password is read from --password or, when omitted, prompted for.

Requirements:
    - A valid database configuration (DB_* environment variables).
    - Migrations applied (`alembic upgrade head`).
"""

import sys
import argparse
import asyncio
import getpass
from dotenv import load_dotenv

from scripts.db import DEFAULT_DATA_TEMPLATE, bootstrap_admin, seed_catalog
from clinic.db import DbManager
from clinic.security import PasswordHasher
from common.config import AppConfig, DatabaseConfig, initialize_config
from common.api_error import AppError, ConfigurationError


def get_db_config() -> tuple[AppConfig, DatabaseConfig]:
    """
    Load and validate database configuration.

    Raises:
        SystemExit: If configuration cannot be loaded.
    """
    try:
        config = initialize_config()
    except ConfigurationError as e:
        print(f"FATAL: Configuration error:\n{e}")
        sys.exit(1)

    if config.database is None:
        print("FATAL: Database configuration required (set DB_HOST and friends)")
        sys.exit(1)
    return config, config.database


async def run_seed_catalog(_db_config: DatabaseConfig) -> None:
    db_manager = DbManager.from_config(_db_config)
    try:
        await db_manager.verify_connection()
        inserted = await seed_catalog(db_manager, DEFAULT_DATA_TEMPLATE)
        for table, count in inserted.items():
            print(f"{table}: {count} inserted")
    finally:
        await db_manager.dispose()


async def run_bootstrap_admin(
    config: AppConfig,
    _db_config: DatabaseConfig,
    username: str,
    password: str,
    full_name: str,
    email: str,
) -> None:
    db_manager = DbManager.from_config(_db_config)
    try:
        await db_manager.verify_connection()
        admin_id = await bootstrap_admin(
            db_manager,
            PasswordHasher(rounds=config.auth.bcrypt_rounds),
            username=username,
            password=password,
            full_name=full_name,
            email=email,
        )
        print(f"Administrator created with admin_id={admin_id}")
    finally:
        await db_manager.dispose()


def main():
    """CLI entry point for database seeding."""
    parser = argparse.ArgumentParser(description="Seed the clinic database")
    subparsers = parser.add_subparsers(dest="mode", required=True)

    subparsers.add_parser("catalog", help="Seed specializations, tests, medications")

    admin_parser = subparsers.add_parser("admin", help="Create the first administrator")
    admin_parser.add_argument("--username", required=True)
    admin_parser.add_argument("--password", help="Prompted for when omitted")
    admin_parser.add_argument("--full-name", required=True)
    admin_parser.add_argument("--email", required=True)

    args = parser.parse_args()
    config, _db_config = get_db_config()

    if args.mode == "catalog":
        asyncio.run(run_seed_catalog(_db_config))
    elif args.mode == "admin":
        password = args.password or getpass.getpass("Administrator password: ")
        if not 8 <= len(password.encode("utf-8")) <= 72:
            print("FATAL: Password must be 8 to 72 bytes long")
            sys.exit(1)
        try:
            asyncio.run(
                run_bootstrap_admin(
                    config,
                    _db_config,
                    args.username,
                    password,
                    args.full_name,
                    args.email,
                )
            )
        except AppError as e:
            print(f"FATAL: {e.message}")
            sys.exit(1)


if __name__ == "__main__":
    load_dotenv()
    main()
