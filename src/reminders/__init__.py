"""Reminder scheduling: schedules, offsets and the ack cycle.

Run the scheduler with: python -m src.reminders
"""

from src.reminders.offsets import format_utc_offset, parse_utc_offset
from src.reminders.schedules import (
    DailyAtTime,
    IntervalWindow,
    ScheduleDefinition,
    ScheduleType,
    UnsupportedScheduleError,
    compute_next_fire,
    next_fire_or_fallback,
)

__all__ = [
    "DailyAtTime",
    "IntervalWindow",
    "ScheduleDefinition",
    "ScheduleType",
    "UnsupportedScheduleError",
    "compute_next_fire",
    "format_utc_offset",
    "next_fire_or_fallback",
    "parse_utc_offset",
]
