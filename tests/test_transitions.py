import pytest

from clinic.db.models import AppointmentStatus, BillingStatus, ScheduleStatus
from clinic.domain import (
    APPOINTMENT_TRANSITIONS,
    BILLING_TRANSITIONS,
    SCHEDULE_TRANSITIONS,
    InvalidTransitionError,
    can_transition,
    ensure_transition,
    is_terminal,
)


class TestAppointmentTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            (AppointmentStatus.REQUESTED, AppointmentStatus.SCHEDULED),
            (AppointmentStatus.REQUESTED, AppointmentStatus.CANCELED),
            (AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED),
            (AppointmentStatus.SCHEDULED, AppointmentStatus.CANCELED),
        ],
    )
    def test_allowed_edges(self, current, target):
        assert can_transition(current, target, APPOINTMENT_TRANSITIONS)

    def test_requested_cannot_complete(self):
        assert not can_transition(
            AppointmentStatus.REQUESTED,
            AppointmentStatus.COMPLETED,
            APPOINTMENT_TRANSITIONS,
        )

    @pytest.mark.parametrize(
        "status", [AppointmentStatus.COMPLETED, AppointmentStatus.CANCELED]
    )
    def test_terminal_states_have_no_exits(self, status):
        assert is_terminal(status, APPOINTMENT_TRANSITIONS)
        for target in AppointmentStatus:
            assert not can_transition(status, target, APPOINTMENT_TRANSITIONS)

    def test_every_status_is_in_the_table(self):
        assert set(APPOINTMENT_TRANSITIONS) == set(AppointmentStatus)


class TestScheduleTransitions:
    def test_scheduled_can_close_either_way(self):
        assert SCHEDULE_TRANSITIONS[ScheduleStatus.SCHEDULED] == {
            ScheduleStatus.CANCELLED,
            ScheduleStatus.COMPLETED,
        }

    def test_closed_windows_are_terminal(self):
        assert is_terminal(ScheduleStatus.CANCELLED, SCHEDULE_TRANSITIONS)
        assert is_terminal(ScheduleStatus.COMPLETED, SCHEDULE_TRANSITIONS)


class TestBillingTransitions:
    def test_pending_to_paid_only(self):
        assert BILLING_TRANSITIONS[BillingStatus.PENDING] == {BillingStatus.PAID}
        assert is_terminal(BillingStatus.PAID, BILLING_TRANSITIONS)


class TestEnsureTransition:
    def test_allowed_edge_passes(self):
        ensure_transition(
            "Billing record",
            BillingStatus.PENDING,
            BillingStatus.PAID,
            BILLING_TRANSITIONS,
        )

    def test_same_status_reports_already(self):
        with pytest.raises(InvalidTransitionError, match="already Paid"):
            ensure_transition(
                "Billing record",
                BillingStatus.PAID,
                BillingStatus.PAID,
                BILLING_TRANSITIONS,
            )

    def test_illegal_edge_names_both_states(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            ensure_transition(
                "Schedule",
                ScheduleStatus.COMPLETED,
                ScheduleStatus.CANCELLED,
                SCHEDULE_TRANSITIONS,
            )
        assert "Completed" in exc_info.value.message
        assert "Cancelled" in exc_info.value.message
        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "INVALID_TRANSITION"
