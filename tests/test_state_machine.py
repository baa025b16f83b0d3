"""Tests for the booking status transition table."""

import pytest

from shootbook.errors import InvalidTransitionError
from shootbook.schemas.booking_schema import BookingStatus
from shootbook.scheduling.state_machine import ASSIGNING_TRIGGERS, BookingStateMachine, BookingTrigger

resolve = BookingStateMachine.resolve


class TestHappyPath:
    def test_pending_to_confirmed(self):
        assert resolve(BookingStatus.PENDING, BookingTrigger.CONFIRM) == BookingStatus.CONFIRMED

    def test_full_lifecycle(self):
        status = BookingStatus.PENDING
        trace = [status.value]
        for trigger in (BookingTrigger.CONFIRM, BookingTrigger.START, BookingTrigger.COMPLETE):
            status = resolve(status, trigger)
            trace.append(status.value)
        assert trace == ["pending", "confirmed", "in_progress", "completed"]

    def test_pending_triggers(self):
        assert set(BookingStateMachine.valid_triggers(BookingStatus.PENDING)) == {
            BookingTrigger.CONFIRM, BookingTrigger.CANCEL, BookingTrigger.DISPUTE,
        }

    def test_assigning_triggers(self):
        assert ASSIGNING_TRIGGERS == {BookingTrigger.CONFIRM, BookingTrigger.REASSIGN}


class TestReassign:
    def test_reassign_keeps_confirmed(self):
        assert resolve(BookingStatus.CONFIRMED, BookingTrigger.REASSIGN) == BookingStatus.CONFIRMED

    def test_reassign_keeps_in_progress(self):
        assert resolve(BookingStatus.IN_PROGRESS, BookingTrigger.REASSIGN) == BookingStatus.IN_PROGRESS

    def test_reassign_pending_rejected(self):
        with pytest.raises(InvalidTransitionError):
            resolve(BookingStatus.PENDING, BookingTrigger.REASSIGN)


class TestCancelAndDispute:
    @pytest.mark.parametrize(
        "status",
        [BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS],
    )
    def test_cancel_from_live_statuses(self, status):
        assert resolve(status, BookingTrigger.CANCEL) == BookingStatus.CANCELLED

    @pytest.mark.parametrize(
        "status",
        [BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS],
    )
    def test_dispute_from_live_statuses(self, status):
        assert resolve(status, BookingTrigger.DISPUTE) == BookingStatus.DISPUTED

    @pytest.mark.parametrize(
        "status",
        [BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.DISPUTED],
    )
    def test_terminal_statuses_accept_nothing(self, status):
        assert BookingStateMachine.valid_triggers(status) == []
        with pytest.raises(InvalidTransitionError):
            resolve(status, BookingTrigger.CANCEL)


class TestInvalidTransitions:
    def test_start_from_pending(self):
        with pytest.raises(InvalidTransitionError, match="Valid triggers"):
            resolve(BookingStatus.PENDING, BookingTrigger.START)

    def test_complete_from_confirmed(self):
        with pytest.raises(InvalidTransitionError):
            resolve(BookingStatus.CONFIRMED, BookingTrigger.COMPLETE)

    def test_error_lists_valid_triggers(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            resolve(BookingStatus.CONFIRMED, BookingTrigger.CONFIRM)
        assert "start" in exc_info.value.details["valid"]
        assert exc_info.value.details["status"] == "confirmed"
