"""Tests for Telegram polling cursor operations."""

import unittest
from datetime import UTC, datetime
from unittest.mock import MagicMock

from src.database.telegram.models import POLLING_CURSOR_ID, TelegramPollingCursor
from src.database.telegram.operations import advance_polling_cursor, get_or_create_polling_cursor


class TestGetOrCreatePollingCursor(unittest.TestCase):
    """Tests for get_or_create_polling_cursor operation."""

    def test_creates_cursor_when_missing(self) -> None:
        """Test that a missing cursor is created at zero."""
        mock_session = MagicMock()
        mock_session.get.return_value = None

        cursor = get_or_create_polling_cursor(mock_session)

        self.assertEqual(cursor.id, POLLING_CURSOR_ID)
        self.assertEqual(cursor.last_update_id, 0)
        self.assertIsNone(cursor.next_offset)
        mock_session.add.assert_called_once_with(cursor)

    def test_returns_existing_cursor(self) -> None:
        """Test that an existing cursor is reused."""
        mock_session = MagicMock()
        existing = TelegramPollingCursor(id=POLLING_CURSOR_ID, last_update_id=50)
        mock_session.get.return_value = existing

        cursor = get_or_create_polling_cursor(mock_session)

        self.assertIs(cursor, existing)
        self.assertEqual(cursor.next_offset, 51)
        mock_session.get.assert_called_once_with(TelegramPollingCursor, POLLING_CURSOR_ID)
        mock_session.add.assert_not_called()


class TestAdvancePollingCursor(unittest.TestCase):
    """Tests for advance_polling_cursor operation."""

    def setUp(self) -> None:
        """Set up a session holding a cursor at 50."""
        self.mock_session = MagicMock()
        self.cursor = TelegramPollingCursor(id=POLLING_CURSOR_ID, last_update_id=50)
        self.mock_session.get.return_value = self.cursor

    def test_moves_forward(self) -> None:
        """Test advancing the cursor."""
        now = datetime(2024, 1, 1, tzinfo=UTC)

        advance_polling_cursor(self.mock_session, 75, now=now)

        self.assertEqual(self.cursor.last_update_id, 75)
        self.assertEqual(self.cursor.updated_at, now)
        self.mock_session.flush.assert_called_once()

    def test_never_moves_backwards(self) -> None:
        """Test that an older update id is ignored."""
        advance_polling_cursor(self.mock_session, 40)

        self.assertEqual(self.cursor.last_update_id, 50)
        self.mock_session.flush.assert_not_called()


if __name__ == "__main__":
    unittest.main()
