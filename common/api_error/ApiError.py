# common/api_error/ApiError.py
from typing import Any


class AppError(Exception):
    """Base error for all application-specific issues."""

    status_code: int = 400
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        """Body rendered by the API exception handler."""
        return {"error": self.code, "message": self.message}


class DatabaseError(AppError):
    """Unexpected data-access fault, wrapped so raw driver errors never leak."""

    status_code = 500
    code = "DATABASE_ERROR"


__all__ = ["AppError", "DatabaseError"]
