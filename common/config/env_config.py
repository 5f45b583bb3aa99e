# common/config/env_config.py
import os
from typing import Optional
from common.api_error import ConfigurationError
from .config_types import EnvBool


def get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Get env variable with optional default
    """
    return os.getenv(name, default=default)


def require_env(name: str) -> str:
    """
    Get required environment variable or raise immediately.
    """
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(f"Missing required env variables: {name}")
    return value


def get_env_flag(name: str, default: EnvBool = EnvBool.FALSE) -> bool:
    """
    Read a true/false feature flag. Unset means `default`.
    """
    raw = os.getenv(name)
    if not raw:
        return default.enabled
    try:
        return EnvBool.parse(raw).enabled
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be true or false, got {raw!r}") from exc


__all__ = ["require_env", "get_env", "get_env_flag"]
