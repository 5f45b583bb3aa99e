# common/config/app_config.py
"""
Complete application configuration with validation.

Sections: database (with SSL), JWT authentication, and the clinic rule
switches that tighten legacy behaviour when enabled.
"""

from typing import Optional, Any
from pydantic import BaseModel, Field, field_validator, model_validator, SecretStr
from .config_types import EnvLogLevel, DbDriver, SslMode, Environment
from .env_config import require_env, get_env, get_env_flag
from .logging_config import LoggingConfig
from pathlib import Path


class DatabaseConfig(BaseModel):
    """
    Database configuration with SSL/TLS support.

    For the sqlite driver ``name`` is the database file path (or ``:memory:``)
    and host/port are ignored.
    """

    host: str = Field(..., min_length=1)
    port: int = Field(..., gt=0, le=65535)
    name: str = Field(..., min_length=1, description="Database name")

    username: Optional[str] = Field(default=None, min_length=1)
    password: Optional[SecretStr] = Field(default=None)

    pool_size: int = Field(..., ge=1, le=100)
    max_overflow: int = Field(..., ge=0, le=100)
    pool_timeout: int = Field(..., ge=1, le=300)
    pool_recycle: int = Field(..., ge=300)

    ssl_mode: Optional[SslMode] = Field(default=None)
    ssl_cert_path: Optional[Path] = Field(default=None)
    ssl_key_path: Optional[Path] = Field(default=None)
    ssl_ca_path: Optional[Path] = Field(default=None)

    driver: DbDriver = Field(...)
    echo_sql: bool = Field(default=False)

    model_config = {"frozen": True}

    @field_validator("ssl_cert_path", "ssl_key_path", "ssl_ca_path")
    @classmethod
    def validate_ssl_paths(cls, v: Optional[Path]) -> Optional[Path]:
        """Validate SSL certificate paths exist."""
        if v is not None and not v.exists():
            raise ValueError(f"SSL file not found: {v}")
        return v

    def get_connection_url(self, include_password: bool = False) -> str:
        """
        Build SQLAlchemy connection URL.

        Args:
            include_password: If True, include password in URL (use for actual connections)
                            If False, mask it (use for logging)
        """
        if self.driver is DbDriver.AIOSQLITE:
            return f"sqlite+aiosqlite:///{self.name}"

        if self.username:
            if include_password and self.password:
                auth = f"{self.username}:{self.password.get_secret_value()}"
            else:
                auth = f"{self.username}:****"
            return f"postgresql+{self.driver.value}://{auth}@{self.host}:{self.port}/{self.name}"

        return f"postgresql+{self.driver.value}://{self.host}:{self.port}/{self.name}"

    def requires_ssl(self) -> bool:
        return self.ssl_mode in [
            SslMode.REQUIRE,
            SslMode.VERIFY_CA,
            SslMode.VERIFY_FULL,
        ]

    def to_dict_safe(self) -> dict[str, Any]:
        """Convert to dict with sensitive data masked (safe for logging)."""
        data = self.model_dump()
        if data.get("password"):
            data["password"] = "****"
        return data


class AuthConfig(BaseModel):
    """
    Bearer-token settings.

    Tokens are HMAC-signed JWTs; issuer and audience are checked on decode.
    """

    secret_key: SecretStr
    algorithm: str = Field(default="HS256", pattern=r"^HS(256|384|512)$")
    issuer: str = Field(default="clinic-api", min_length=1)
    audience: str = Field(default="clinic-clients", min_length=1)
    access_token_expire_minutes: int = Field(default=60, ge=1, le=24 * 60)
    bcrypt_rounds: int = Field(default=12, ge=4, le=16)

    model_config = {"frozen": True}

    @field_validator("secret_key")
    @classmethod
    def validate_secret_length(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) < 16:
            raise ValueError("JWT secret must be at least 16 characters")
        return v


class ClinicConfig(BaseModel):
    """
    Business-rule switches. Both default to the permissive legacy behaviour.
    """

    reject_overlapping_schedules: bool = False
    reject_unknown_medications: bool = False

    model_config = {"frozen": True}


class AppConfig(BaseModel):
    """
    Complete application configuration.

    All configuration is loaded from environment variables and validated
    at startup. Invalid configuration fails fast with clear error messages.
    """

    app_title: str = Field(..., min_length=1)
    app_version: str = Field(..., pattern=r"^\d+\.\d+\.\d+$")
    environment: str = Field(..., pattern="^(development|staging|production)$")

    logging: LoggingConfig
    auth: AuthConfig
    clinic: ClinicConfig = Field(default_factory=ClinicConfig)
    database: Optional[DatabaseConfig] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_production_settings(self) -> "AppConfig":
        if self.environment == "production":
            if self.database is None:
                raise ValueError("Database config required in production")
            if self.database.driver is DbDriver.AIOSQLITE:
                raise ValueError("sqlite driver not allowed in production")
            if self.logging.log_level == EnvLogLevel.DEBUG:
                raise ValueError("DEBUG log level not allowed in production")
        return self


def load_database_config(environment: Environment) -> Optional[DatabaseConfig]:
    """
    Load database configuration from environment.

    Required (when DB_HOST is set):
    - DB_PORT, DB_NAME, DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT,
      DB_POOL_RECYCLE, DB_DRIVER (asyncpg, aiosqlite)

    Optional (dev) / Required (prod):
    - DB_USER, DB_PASSWORD, DB_SSL_MODE

    Optional:
    - DB_SSL_CERT, DB_SSL_KEY, DB_SSL_CA, DB_ECHO
    """
    host = get_env("DB_HOST")
    if not host:
        return None

    driver_str = require_env("DB_DRIVER")
    try:
        driver = DbDriver(driver_str)
    except ValueError:
        valid_drivers = [d.value for d in DbDriver]
        raise ValueError(
            f"Invalid DB_DRIVER: {driver_str}. Must be one of: {valid_drivers}"
        )

    if environment.is_production:
        username = require_env("DB_USER")
        password_str: Optional[str] = require_env("DB_PASSWORD")
        ssl_mode_str: Optional[str] = require_env("DB_SSL_MODE")
    else:
        username = get_env("DB_USER")
        password_str = get_env("DB_PASSWORD")
        ssl_mode_str = get_env("DB_SSL_MODE")

    ssl_mode: Optional[SslMode] = None
    if ssl_mode_str:
        try:
            ssl_mode = SslMode(ssl_mode_str)
        except ValueError:
            valid_modes = [m.value for m in SslMode]
            raise ValueError(
                f"Invalid DB_SSL_MODE: {ssl_mode_str}. Must be one of: {valid_modes}"
            )

    def _optional_path(key: str) -> Optional[Path]:
        raw = get_env(key)
        return Path(raw) if raw else None

    return DatabaseConfig(
        host=host,
        port=int(require_env("DB_PORT")),
        name=require_env("DB_NAME"),
        username=username,
        password=SecretStr(password_str) if password_str else None,
        pool_size=int(require_env("DB_POOL_SIZE")),
        max_overflow=int(require_env("DB_MAX_OVERFLOW")),
        pool_timeout=int(require_env("DB_POOL_TIMEOUT")),
        pool_recycle=int(require_env("DB_POOL_RECYCLE")),
        ssl_mode=ssl_mode,
        ssl_cert_path=_optional_path("DB_SSL_CERT"),
        ssl_key_path=_optional_path("DB_SSL_KEY"),
        ssl_ca_path=_optional_path("DB_SSL_CA"),
        driver=driver,
        echo_sql=get_env_flag("DB_ECHO"),
    )


def load_auth_config() -> AuthConfig:
    """
    JWT_SECRET_KEY is required; the rest fall back to model defaults.
    """
    overrides: dict[str, Any] = {}
    for env_key, field in (
        ("JWT_ALGORITHM", "algorithm"),
        ("JWT_ISSUER", "issuer"),
        ("JWT_AUDIENCE", "audience"),
        ("ACCESS_TOKEN_EXPIRE_MINUTES", "access_token_expire_minutes"),
        ("BCRYPT_ROUNDS", "bcrypt_rounds"),
    ):
        value = get_env(env_key)
        if value:
            overrides[field] = value

    return AuthConfig(
        secret_key=SecretStr(require_env("JWT_SECRET_KEY")),
        **overrides,
    )


def load_clinic_config() -> ClinicConfig:
    return ClinicConfig(
        reject_overlapping_schedules=get_env_flag("SCHEDULE_REJECT_OVERLAP"),
        reject_unknown_medications=get_env_flag(
            "CONSULTATION_REJECT_UNKNOWN_MEDICATION"
        ),
    )


def load_app_config() -> AppConfig:
    """
    Load complete application configuration.

    Raises:
        ValidationError: If configuration is invalid
        ConfigurationError: If required env vars are missing
    """
    from .logging_config import load_logging_config

    env_str = require_env("ENVIRONMENT")

    try:
        environment = Environment(env_str)
    except ValueError:
        valid_envs = [e.value for e in Environment]
        raise ValueError(
            f"Invalid ENVIRONMENT: {env_str}. Must be one of: {valid_envs}"
        )

    return AppConfig(
        app_title=require_env("APP_TITLE"),
        app_version=require_env("APP_VERSION"),
        environment=environment.value,
        logging=load_logging_config(),
        auth=load_auth_config(),
        clinic=load_clinic_config(),
        database=load_database_config(environment),
    )


__all__ = [
    "AppConfig",
    "AuthConfig",
    "ClinicConfig",
    "DatabaseConfig",
    "load_app_config",
]
