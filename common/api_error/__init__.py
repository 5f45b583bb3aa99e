# common/api_error/__init__.py
from .ApiError import AppError, DatabaseError
from .config_error import ConfigurationError

__all__ = ["AppError", "DatabaseError", "ConfigurationError"]
