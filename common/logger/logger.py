# common/logger/logger.py
"""
Application logger with explicit initialization.

Usage:
    from common.logger import get_app_logger

    logger = get_app_logger(__name__)
    logger.info("Appointment approved", appointment_id=12)

    # Carry context through a workflow
    log = logger.bind(doctor_id=3, appointment_id=12)
    log.warning("Medication not found, prescription dropped", medication_id=99)
"""

from typing import Any, Optional
import structlog

from common.config.structlog_config import get_logger as _get_structlog_logger


class AppLogger:
    """
    Thin wrapper over a structlog BoundLogger.

    The structlog logger is resolved lazily so modules can create their
    logger at import time, before configure_structlog() has run.
    """

    def __init__(self, name: str = "clinic", context: Optional[dict[str, Any]] = None):
        self._name = name
        self._context: dict[str, Any] = dict(context or {})
        self._logger_instance: Optional[structlog.BoundLogger] = None

    @property
    def _logger(self) -> structlog.BoundLogger:
        if self._logger_instance is None:
            base = _get_structlog_logger(self._name)
            self._logger_instance = base.bind(**self._context) if self._context else base
        return self._logger_instance

    @property
    def name(self) -> str:
        return self._name

    def bind(self, **context: Any) -> "AppLogger":
        """Return a child logger that adds ``context`` to every event."""
        return AppLogger(self._name, {**self._context, **context})

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._logger.debug(msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._logger.info(msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._logger.warning(msg, **kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._logger.error(msg, **kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        self._logger.critical(msg, **kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log at error level with the active exception's traceback."""
        self._logger.error(msg, exc_info=True, **kwargs)


def get_app_logger(name: str = "clinic") -> AppLogger:
    """
    Get application logger instance.

    Example:
        >>> logger = get_app_logger("clinic.services.v1.doctor_service")
        >>> logger.info("Consultation completed", billing_id=7)
    """
    return AppLogger(name=name)


# Convenience instance for simple usage
logger = get_app_logger()

__all__ = ["logger", "AppLogger", "get_app_logger"]
