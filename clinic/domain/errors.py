# clinic/domain/errors.py
"""
Domain error taxonomy.

Each kind carries its own HTTP status and machine-readable code so the API
layer renders them without a lookup table.
"""

from common.api_error import AppError


class NotFoundError(AppError):
    """Entity does not exist or is outside the caller's scope."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: object = None):
        self.entity = entity
        self.entity_id = entity_id
        message = f"{entity} not found"
        if entity_id is not None:
            message = f"{entity} {entity_id} not found"
        super().__init__(message)


class InvalidTransitionError(AppError):
    status_code = 409
    code = "INVALID_TRANSITION"


class ScheduleConflictError(AppError):
    """Date outside every Scheduled window, or an overlapping window."""

    status_code = 409
    code = "SCHEDULE_CONFLICT"


class AlreadyTakenError(AppError):
    status_code = 409
    code = "ALREADY_TAKEN"


class AuthenticationError(AppError):
    status_code = 401
    code = "AUTHENTICATION_FAILED"


class AuthorizationError(AppError):
    status_code = 403
    code = "FORBIDDEN"


class InvalidRequestError(AppError):
    status_code = 422
    code = "INVALID_REQUEST"


__all__ = [
    "NotFoundError",
    "InvalidTransitionError",
    "ScheduleConflictError",
    "AlreadyTakenError",
    "AuthenticationError",
    "AuthorizationError",
    "InvalidRequestError",
]
