# common/__init__.py
"""
Shared infrastructure: configuration, errors, logging.
"""

from .api_error import AppError, ConfigurationError, DatabaseError
from .config import (
    AppConfig,
    AuthConfig,
    ClinicConfig,
    DatabaseConfig,
    get_config,
    initialize_config,
)
from .context_vars import request_id_context_var
from .logger import AppLogger, get_app_logger, logger

__all__ = [
    "AppError",
    "ConfigurationError",
    "DatabaseError",
    "AppConfig",
    "AuthConfig",
    "ClinicConfig",
    "DatabaseConfig",
    "get_config",
    "initialize_config",
    "request_id_context_var",
    "AppLogger",
    "get_app_logger",
    "logger",
]
