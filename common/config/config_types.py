# common/config/config_types.py
"""Configuration type definitions."""

from enum import Enum
import logging


class EnvBool(str, Enum):
    TRUE = "true"
    FALSE = "false"

    @classmethod
    def parse(cls, raw: str) -> "EnvBool":
        """Accept the usual spellings of a boolean flag (true/1/yes, false/0/no)."""
        value = raw.strip().lower()
        if value in ("true", "1", "yes", "on"):
            return cls.TRUE
        if value in ("false", "0", "no", "off"):
            return cls.FALSE
        raise ValueError(f"Invalid boolean flag: {raw!r}")

    @property
    def enabled(self) -> bool:
        return self is EnvBool.TRUE

    def __str__(self) -> str:
        return self.value


class EnvLogLevel(str, Enum):
    """
    Supported log levels.

    Inherits from str so values serialize naturally to JSON/strings.

    Examples:
        >>> EnvLogLevel.INFO.value
        'INFO'
        >>> EnvLogLevel.INFO.level
        20
    """

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def level(self) -> int:
        """Get numeric logging level for stdlib logging module."""
        return getattr(logging, self.value)

    def __str__(self) -> str:
        return self.value


class EnvLogFormat(str, Enum):
    """How structlog renders events: coloured console lines or one JSON object per line."""

    CONSOLE = "console"
    JSON = "json"

    def __str__(self) -> str:
        return self.value


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @property
    def is_production(self) -> bool:
        return self == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        return self == Environment.DEVELOPMENT

    def __str__(self) -> str:
        return self.value


class DbDriver(str, Enum):
    """Supported async database drivers."""

    ASYNCPG = "asyncpg"
    AIOSQLITE = "aiosqlite"

    @property
    def dialect(self) -> str:
        return "sqlite" if self is DbDriver.AIOSQLITE else "postgresql"


class SslMode(str, Enum):
    """PostgreSQL SSL modes."""

    DISABLE = "disable"
    ALLOW = "allow"
    PREFER = "prefer"
    REQUIRE = "require"
    VERIFY_CA = "verify-ca"
    VERIFY_FULL = "verify-full"


__all__ = [
    "EnvBool",
    "EnvLogLevel",
    "EnvLogFormat",
    "Environment",
    "DbDriver",
    "SslMode",
]
