# common/logger/__init__.py
from .logger import AppLogger, get_app_logger, logger

__all__ = ["AppLogger", "get_app_logger", "logger"]
