"""Tests for the reminder acknowledgment cycle."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

from src.database.reminders.models import Reminder
from src.reminders.ack import (
    AckOutcome,
    acknowledge,
    apply_acknowledgement,
    cycle_token_for_delivery,
    new_cycle_token,
    record_delivery,
)
from src.reminders.schedules import FALLBACK_DELAY, ScheduleType


def _make_reminder(**overrides: object) -> Reminder:
    """Create an in-memory daily 09:30 reminder."""
    values: dict[str, object] = {
        "id": 7,
        "owner_id": 42,
        "title": "Stretch",
        "message": "Time to stretch",
        "schedule_type": ScheduleType.DAILY_AT_TIME.value,
        "daily_time_minutes": 570,
        "is_enabled": True,
        "awaiting_ack": False,
        "active_cycle_token": None,
        "next_fire_at": datetime(2024, 1, 1, 6, 30, tzinfo=UTC),
    }
    values.update(overrides)
    return Reminder(**values)


class TestCycleTokens(unittest.TestCase):
    """Tests for cycle token selection."""

    def test_new_tokens_are_unique_hex(self) -> None:
        """Test that fresh tokens are 128-bit hex and differ."""
        first, second = new_cycle_token(), new_cycle_token()

        self.assertEqual(len(first), 32)
        int(first, 16)
        self.assertNotEqual(first, second)

    def test_idle_reminder_gets_new_token(self) -> None:
        """Test that an idle reminder starts a new cycle."""
        reminder = _make_reminder()

        token = cycle_token_for_delivery(reminder)

        self.assertTrue(token)
        self.assertIsNone(reminder.active_cycle_token)

    def test_awaiting_reminder_keeps_token(self) -> None:
        """Test that a re-send reuses the active token."""
        reminder = _make_reminder(awaiting_ack=True, active_cycle_token="abc")

        self.assertEqual(cycle_token_for_delivery(reminder), "abc")

    def test_awaiting_reminder_with_blank_token_gets_new_token(self) -> None:
        """Test that a blank active token is replaced."""
        reminder = _make_reminder(awaiting_ack=True, active_cycle_token="  ")

        self.assertNotEqual(cycle_token_for_delivery(reminder).strip(), "")


class TestRecordDelivery(unittest.TestCase):
    """Tests for record_delivery function."""

    def test_enters_awaiting_state(self) -> None:
        """Test that a delivery starts the awaiting state and schedules a re-send."""
        reminder = _make_reminder()
        now = datetime(2024, 1, 1, 6, 30, tzinfo=UTC)

        record_delivery(reminder, "tok", now, timedelta(hours=2))

        self.assertTrue(reminder.awaiting_ack)
        self.assertEqual(reminder.active_cycle_token, "tok")
        self.assertEqual(reminder.last_fired_at, now)
        self.assertEqual(reminder.next_fire_at, now + timedelta(hours=2))
        self.assertEqual(reminder.updated_at, now)


class TestApplyAcknowledgement(unittest.TestCase):
    """Tests for apply_acknowledgement function."""

    def test_matching_token_ends_cycle(self) -> None:
        """Test that the active token acknowledges and recomputes next fire."""
        reminder = _make_reminder(awaiting_ack=True, active_cycle_token="tok")
        now = datetime(2024, 1, 1, 7, 0, tzinfo=UTC)

        outcome = apply_acknowledgement(reminder, "tok", timedelta(hours=3), now)

        self.assertEqual(outcome, AckOutcome.ACCEPTED)
        self.assertFalse(reminder.awaiting_ack)
        self.assertIsNone(reminder.active_cycle_token)
        self.assertEqual(reminder.last_acknowledged_at, now)
        self.assertEqual(reminder.next_fire_at, datetime(2024, 1, 2, 6, 30, tzinfo=UTC))

    def test_mismatched_token_is_stale(self) -> None:
        """Test that a token from an earlier cycle changes nothing."""
        next_fire = datetime(2024, 1, 1, 8, 30, tzinfo=UTC)
        reminder = _make_reminder(
            awaiting_ack=True, active_cycle_token="current", next_fire_at=next_fire
        )

        outcome = apply_acknowledgement(
            reminder, "old", timedelta(0), datetime(2024, 1, 1, 7, 0, tzinfo=UTC)
        )

        self.assertEqual(outcome, AckOutcome.STALE_CYCLE)
        self.assertTrue(reminder.awaiting_ack)
        self.assertEqual(reminder.active_cycle_token, "current")
        self.assertEqual(reminder.next_fire_at, next_fire)
        self.assertIsNone(reminder.last_acknowledged_at)

    def test_idle_reminder_is_stale(self) -> None:
        """Test that acknowledging an idle reminder is rejected."""
        reminder = _make_reminder()

        outcome = apply_acknowledgement(
            reminder, "tok", timedelta(0), datetime(2024, 1, 1, 7, 0, tzinfo=UTC)
        )

        self.assertEqual(outcome, AckOutcome.STALE_CYCLE)
        self.assertIsNone(reminder.last_acknowledged_at)

    def test_second_acknowledgement_is_stale(self) -> None:
        """Test that the same token cannot acknowledge twice."""
        reminder = _make_reminder(awaiting_ack=True, active_cycle_token="tok")
        now = datetime(2024, 1, 1, 7, 0, tzinfo=UTC)

        first = apply_acknowledgement(reminder, "tok", timedelta(0), now)
        next_fire = reminder.next_fire_at
        second = apply_acknowledgement(reminder, "tok", timedelta(0), now + timedelta(minutes=1))

        self.assertEqual(first, AckOutcome.ACCEPTED)
        self.assertEqual(second, AckOutcome.STALE_CYCLE)
        self.assertEqual(reminder.next_fire_at, next_fire)

    def test_empty_token_is_stale(self) -> None:
        """Test that an empty token never matches."""
        reminder = _make_reminder(awaiting_ack=True, active_cycle_token="tok")

        outcome = apply_acknowledgement(
            reminder, "", timedelta(0), datetime(2024, 1, 1, 7, 0, tzinfo=UTC)
        )

        self.assertEqual(outcome, AckOutcome.STALE_CYCLE)

    def test_unresolvable_schedule_postpones_one_day(self) -> None:
        """Test that an invalid stored schedule falls back to one day."""
        reminder = _make_reminder(
            awaiting_ack=True,
            active_cycle_token="tok",
            schedule_type="weekly",
        )
        now = datetime(2024, 1, 1, 7, 0, tzinfo=UTC)

        outcome = apply_acknowledgement(reminder, "tok", timedelta(0), now)

        self.assertEqual(outcome, AckOutcome.ACCEPTED)
        self.assertEqual(reminder.next_fire_at, now + FALLBACK_DELAY)


class TestAcknowledge(unittest.TestCase):
    """Tests for acknowledge function."""

    @patch("src.reminders.ack.resolve_owner_offset")
    @patch("src.reminders.ack.get_reminder_for_owner")
    def test_accepts_and_flushes(
        self, mock_get_reminder: MagicMock, mock_resolve_offset: MagicMock
    ) -> None:
        """Test an accepted acknowledgment locks the row and flushes."""
        reminder = _make_reminder(awaiting_ack=True, active_cycle_token="tok")
        mock_get_reminder.return_value = reminder
        mock_resolve_offset.return_value = timedelta(hours=3)
        mock_session = MagicMock()
        now = datetime(2024, 1, 1, 5, 0, tzinfo=UTC)

        with self.assertLogs("src.reminders.ack", level="INFO") as logs:
            result = acknowledge(mock_session, 7, "tok", 42, now)

        self.assertTrue(result.accepted)
        self.assertIn("daily at 09:30", logs.output[0])
        self.assertEqual(result.next_fire_at, datetime(2024, 1, 1, 6, 30, tzinfo=UTC))
        self.assertEqual(result.utc_offset, timedelta(hours=3))
        mock_get_reminder.assert_called_once_with(mock_session, 7, 42, for_update=True)
        mock_session.flush.assert_called_once()

    @patch("src.reminders.ack.get_reminder_for_owner")
    def test_unknown_reminder_is_not_found(self, mock_get_reminder: MagicMock) -> None:
        """Test that a reminder not owned by the user is not found."""
        mock_get_reminder.return_value = None
        mock_session = MagicMock()

        result = acknowledge(mock_session, 7, "tok", 99)

        self.assertEqual(result.outcome, AckOutcome.NOT_FOUND)
        self.assertFalse(result.accepted)
        mock_session.flush.assert_not_called()

    @patch("src.reminders.ack.resolve_owner_offset")
    @patch("src.reminders.ack.get_reminder_for_owner")
    def test_stale_token_does_not_flush(
        self, mock_get_reminder: MagicMock, mock_resolve_offset: MagicMock
    ) -> None:
        """Test that a stale acknowledgment leaves the session untouched."""
        mock_get_reminder.return_value = _make_reminder(
            awaiting_ack=True, active_cycle_token="current"
        )
        mock_resolve_offset.return_value = timedelta(0)
        mock_session = MagicMock()

        result = acknowledge(mock_session, 7, "old", 42)

        self.assertEqual(result.outcome, AckOutcome.STALE_CYCLE)
        self.assertIsNone(result.next_fire_at)
        mock_session.flush.assert_not_called()


if __name__ == "__main__":
    unittest.main()
