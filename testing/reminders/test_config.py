"""Tests for scheduler configuration."""

import os
import unittest
from datetime import timedelta
from unittest.mock import patch

from src.reminders.config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_POLL_SECONDS,
    DEFAULT_REPEAT_UNTIL_ACK_MINUTES,
    SchedulerConfig,
)


class TestSchedulerConfig(unittest.TestCase):
    """Tests for SchedulerConfig class."""

    def test_defaults(self) -> None:
        """Test default values when nothing is configured."""
        with patch.dict(os.environ, {}, clear=True):
            settings = SchedulerConfig(_env_file=None)

        self.assertEqual(settings.poll_seconds, DEFAULT_POLL_SECONDS)
        self.assertEqual(settings.repeat_until_ack_minutes, DEFAULT_REPEAT_UNTIL_ACK_MINUTES)
        self.assertEqual(settings.batch_size, DEFAULT_BATCH_SIZE)
        self.assertEqual(settings.poll_interval, timedelta(hours=2))
        self.assertEqual(settings.escalation_interval, timedelta(hours=2))

    def test_reads_environment(self) -> None:
        """Test values loaded from environment variables."""
        env = {
            "SCHEDULER_POLL_SECONDS": "60",
            "REPEAT_UNTIL_ACK_MINUTES": "15",
            "SCHEDULER_BATCH_SIZE": "25",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = SchedulerConfig(_env_file=None)

        self.assertEqual(settings.poll_interval, timedelta(seconds=60))
        self.assertEqual(settings.escalation_interval, timedelta(minutes=15))
        self.assertEqual(settings.batch_size, 25)

    def test_prefixed_repeat_variable(self) -> None:
        """Test the scheduler-prefixed name for the repeat interval."""
        with patch.dict(os.environ, {"SCHEDULER_REPEAT_UNTIL_ACK_MINUTES": "30"}, clear=True):
            settings = SchedulerConfig(_env_file=None)

        self.assertEqual(settings.repeat_until_ack_minutes, 30)

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        """Test that non-numeric and non-positive values use the defaults."""
        env = {
            "SCHEDULER_POLL_SECONDS": "soon",
            "REPEAT_UNTIL_ACK_MINUTES": "0",
            "SCHEDULER_BATCH_SIZE": "-5",
        }
        with patch.dict(os.environ, env, clear=True):
            with self.assertLogs("src.reminders.config", level="WARNING"):
                settings = SchedulerConfig(_env_file=None)

        self.assertEqual(settings.poll_seconds, DEFAULT_POLL_SECONDS)
        self.assertEqual(settings.repeat_until_ack_minutes, DEFAULT_REPEAT_UNTIL_ACK_MINUTES)
        self.assertEqual(settings.batch_size, DEFAULT_BATCH_SIZE)

    def test_keyword_values(self) -> None:
        """Test settings passed directly by field name."""
        with patch.dict(os.environ, {}, clear=True):
            settings = SchedulerConfig(poll_seconds=5, batch_size=3, _env_file=None)

        self.assertEqual(settings.poll_seconds, 5)
        self.assertEqual(settings.batch_size, 3)


if __name__ == "__main__":
    unittest.main()
