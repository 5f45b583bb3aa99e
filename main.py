# main.py
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from common.api_error import AppError, ConfigurationError
from common.config import AppConfig, initialize_config, is_configured
from common.logger import get_app_logger
from common.logger.logger_middleware import RequestLoggingMiddleware
from clinic.api.v1 import (
    admin_router,
    auth_router,
    doctor_router,
    patient_router,
    user_router,
)
from clinic.db import DbManager
from clinic.domain.errors import AuthenticationError

API_PREFIX = "/api/v1"

logger = get_app_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: AppConfig = app.state.config
    _db_config = config.database
    if not _db_config:
        raise RuntimeError("Database configuration required")

    logger.info("Connecting to database", **_db_config.to_dict_safe())

    db_manager = DbManager.from_config(_db_config)
    await db_manager.verify_connection()

    # Fail fast if the schema is behind
    try:
        await db_manager.verify_migrations_current()
    except RuntimeError as e:
        logger.error("Migration check failed", error=str(e))
        logger.error("Run 'alembic upgrade head'")
        raise

    app.state.db_manager = db_manager

    yield
    logger.info("shutting down")
    await db_manager.dispose()


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="Current system health status")
    timestamp: datetime = Field(..., description="Server time in ISO 8601 format")
    version: str = Field(..., description="Application version")
    environment: str
    logging_configured: bool = Field(..., description="Logging configuration status")
    database: Optional[dict] = Field(None, description="Database probe result")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable explanation")
    timestamp: datetime = Field(..., description="Server time when the error occurred")


def _error_response(status_code: int, payload: dict, headers=None) -> JSONResponse:
    body = ErrorResponse(**payload, timestamp=_utc_now())
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


def create_app(config: AppConfig) -> FastAPI:
    app = FastAPI(
        title=config.app_title,
        version=config.app_version,
        description=f"Running in {config.environment} environment",
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(
        RequestLoggingMiddleware,
        log_query_params=config.environment != "production",
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"Domain Error: {exc.code}",
            path=request.url.path,
            error_code=exc.code,
            message=exc.message,
        )
        headers = (
            {"WWW-Authenticate": "Bearer"}
            if isinstance(exc, AuthenticationError)
            else None
        )
        return _error_response(exc.status_code, exc.to_payload(), headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path)
        return _error_response(
            500,
            {"error": "INTERNAL_ERROR", "message": "An unexpected error occurred"},
        )

    @app.get(
        "/health",
        response_model=HealthCheckResponse,
        tags=["Health"],
        responses={200: {"description": "System is healthy"}},
    )
    async def check_health(request: Request) -> HealthCheckResponse:
        db_manager: Optional[DbManager] = getattr(request.app.state, "db_manager", None)
        database = await db_manager.health_check() if db_manager else None
        healthy = database is None or database.get("healthy", False)
        return HealthCheckResponse(
            status="Healthy" if healthy else "Degraded",
            timestamp=_utc_now(),
            version=config.app_version,
            environment=config.environment,
            logging_configured=is_configured(),
            database=database,
        )

    for router in (auth_router, user_router, patient_router, doctor_router, admin_router):
        app.include_router(router, prefix=API_PREFIX)

    return app


load_dotenv()
try:
    config = initialize_config()
except ConfigurationError as e:
    # Can't use logger yet, but that's OK - this is a fatal startup error
    print(f"FATAL: Configuration error:\n{e}")
    sys.exit(1)

app = create_app(config)

__all__ = ["app", "config", "create_app", "API_PREFIX"]
