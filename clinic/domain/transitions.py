# clinic/domain/transitions.py
"""
Allowed status edges per entity.

Anything missing from a table is illegal; an empty set marks a terminal
status.
"""

from enum import Enum
from typing import Mapping, TypeVar

from clinic.db.models import AppointmentStatus, BillingStatus, ScheduleStatus
from .errors import InvalidTransitionError

StatusT = TypeVar("StatusT", bound=Enum)

APPOINTMENT_TRANSITIONS: Mapping[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.REQUESTED: frozenset(
        {AppointmentStatus.SCHEDULED, AppointmentStatus.CANCELED}
    ),
    AppointmentStatus.SCHEDULED: frozenset(
        {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELED}
    ),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELED: frozenset(),
}

SCHEDULE_TRANSITIONS: Mapping[ScheduleStatus, frozenset[ScheduleStatus]] = {
    ScheduleStatus.SCHEDULED: frozenset(
        {ScheduleStatus.CANCELLED, ScheduleStatus.COMPLETED}
    ),
    ScheduleStatus.CANCELLED: frozenset(),
    ScheduleStatus.COMPLETED: frozenset(),
}

BILLING_TRANSITIONS: Mapping[BillingStatus, frozenset[BillingStatus]] = {
    BillingStatus.PENDING: frozenset({BillingStatus.PAID}),
    BillingStatus.PAID: frozenset(),
}


def is_terminal(
    status: StatusT, table: Mapping[StatusT, frozenset[StatusT]]
) -> bool:
    return not table[status]


def can_transition(
    current: StatusT,
    target: StatusT,
    table: Mapping[StatusT, frozenset[StatusT]],
) -> bool:
    return target in table[current]


def ensure_transition(
    entity: str,
    current: StatusT,
    target: StatusT,
    table: Mapping[StatusT, frozenset[StatusT]],
) -> None:
    """
    Raises:
        InvalidTransitionError: If ``current -> target`` is not in ``table``
    """
    if can_transition(current, target, table):
        return
    if current == target:
        raise InvalidTransitionError(f"{entity} is already {current.value}")
    raise InvalidTransitionError(
        f"Cannot change {entity.lower()} status from {current.value} to {target.value}"
    )


__all__ = [
    "APPOINTMENT_TRANSITIONS",
    "SCHEDULE_TRANSITIONS",
    "BILLING_TRANSITIONS",
    "is_terminal",
    "can_transition",
    "ensure_transition",
]
