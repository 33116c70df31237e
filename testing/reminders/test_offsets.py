"""Tests for owner UTC offset resolution."""

import unittest
from datetime import timedelta
from unittest.mock import MagicMock, patch

from src.reminders.offsets import format_utc_offset, parse_utc_offset, resolve_owner_offset


class TestParseUtcOffset(unittest.TestCase):
    """Tests for parse_utc_offset function."""

    def test_parses_positive_offset(self) -> None:
        """Test parsing a positive offset."""
        self.assertEqual(parse_utc_offset("UTC+03:00"), timedelta(hours=3))

    def test_parses_negative_offset_with_minutes(self) -> None:
        """Test parsing a negative offset with a minute component."""
        self.assertEqual(parse_utc_offset("UTC-09:30"), -timedelta(hours=9, minutes=30))

    def test_is_case_and_whitespace_tolerant(self) -> None:
        """Test that surrounding whitespace and lowercase prefix are accepted."""
        self.assertEqual(parse_utc_offset("  utc+05:45 "), timedelta(hours=5, minutes=45))

    def test_accepts_maximum_offset(self) -> None:
        """Test that +14:00 is accepted."""
        self.assertEqual(parse_utc_offset("UTC+14:00"), timedelta(hours=14))

    def test_malformed_values_resolve_to_zero(self) -> None:
        """Test that malformed identifiers fall back to zero."""
        for value in (
            None,
            "",
            "   ",
            "Europe/London",
            "UTC",
            "UTC03:00",
            "UTC+3",
            "UTC+ab:00",
            "UTC+03:10",
            "UTC+15:00",
            "UTC+14:30",
        ):
            with self.subTest(value=value):
                self.assertEqual(parse_utc_offset(value), timedelta(0))


class TestFormatUtcOffset(unittest.TestCase):
    """Tests for format_utc_offset function."""

    def test_formats_offsets(self) -> None:
        """Test formatting positive, negative and zero offsets."""
        self.assertEqual(format_utc_offset(timedelta(hours=3)), "UTC+03:00")
        self.assertEqual(format_utc_offset(-timedelta(hours=9, minutes=30)), "UTC-09:30")
        self.assertEqual(format_utc_offset(timedelta(0)), "UTC+00:00")


class TestResolveOwnerOffset(unittest.TestCase):
    """Tests for resolve_owner_offset function."""

    @patch("src.reminders.offsets.get_owner_profile")
    def test_uses_profile_timezone(self, mock_get_profile: MagicMock) -> None:
        """Test that the owner's stored timezone is used."""
        mock_get_profile.return_value = MagicMock(timezone_id="UTC+02:00")
        mock_session = MagicMock()

        result = resolve_owner_offset(mock_session, 42)

        self.assertEqual(result, timedelta(hours=2))
        mock_get_profile.assert_called_once_with(mock_session, 42)

    @patch("src.reminders.offsets.get_owner_profile")
    def test_unknown_owner_is_utc(self, mock_get_profile: MagicMock) -> None:
        """Test that an owner without a profile resolves to zero."""
        mock_get_profile.return_value = None

        self.assertEqual(resolve_owner_offset(MagicMock(), 42), timedelta(0))

    @patch("src.reminders.offsets.get_owner_profile")
    def test_missing_timezone_is_utc(self, mock_get_profile: MagicMock) -> None:
        """Test that a profile without a timezone resolves to zero."""
        mock_get_profile.return_value = MagicMock(timezone_id=None)

        self.assertEqual(resolve_owner_offset(MagicMock(), 42), timedelta(0))


if __name__ == "__main__":
    unittest.main()
