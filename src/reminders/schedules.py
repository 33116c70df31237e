"""Schedule definitions and next-fire calculation for reminders.

A reminder's schedule is one of two variants, both expressed in the owner's
local time (a fixed UTC offset, no DST rules):

- ``DailyAtTime``: once per local day at a given minute.
- ``IntervalWindow``: every ``step_minutes`` inside a local ``[start, end)``
  window, restarting at the window start the next day.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone
from enum import StrEnum

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
MAX_OFFSET = timedelta(hours=14)

# Postponement used when a schedule cannot be resolved
FALLBACK_DELAY = timedelta(days=1)


class ScheduleType(StrEnum):
    """Stored discriminator for schedule variants."""

    DAILY_AT_TIME = "daily_at_time"
    INTERVAL_WINDOW = "interval_window"


class UnsupportedScheduleError(ValueError):
    """Raised when a value is not a known schedule variant."""


def _check_minute(name: str, value: int) -> None:
    if not 0 <= value < MINUTES_PER_DAY:
        raise ValueError(f"{name} must be in 0..{MINUTES_PER_DAY - 1}, got {value}")


@dataclass(frozen=True)
class DailyAtTime:
    """Fire once per local day at ``minute_of_day``."""

    minute_of_day: int

    def __post_init__(self) -> None:
        _check_minute("minute_of_day", self.minute_of_day)


@dataclass(frozen=True)
class IntervalWindow:
    """Fire every ``step_minutes`` within ``[start_minute, end_minute)`` local time."""

    start_minute: int
    end_minute: int
    step_minutes: int

    def __post_init__(self) -> None:
        _check_minute("start_minute", self.start_minute)
        _check_minute("end_minute", self.end_minute)
        if self.end_minute <= self.start_minute:
            raise ValueError(
                f"end_minute ({self.end_minute}) must be after start_minute ({self.start_minute})"
            )
        if self.step_minutes < 1:
            raise ValueError(f"step_minutes must be at least 1, got {self.step_minutes}")


ScheduleDefinition = DailyAtTime | IntervalWindow


def normalise_offset(offset: object) -> timedelta:
    """Return ``offset`` if it is a usable fixed UTC offset, otherwise zero.

    :param offset: Candidate offset.
    :returns: The offset, or ``timedelta(0)`` when malformed.
    """
    if not isinstance(offset, timedelta):
        return timedelta(0)
    if abs(offset) > MAX_OFFSET or offset % timedelta(minutes=1):
        return timedelta(0)
    return offset


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _next_daily(now_local: datetime, minute_of_day: int) -> datetime:
    day_start = now_local.replace(hour=0, minute=0, second=0, microsecond=0)
    target = day_start + timedelta(minutes=minute_of_day)
    return target if target > now_local else target + timedelta(days=1)


def _next_in_window(now_local: datetime, window: IntervalWindow) -> datetime:
    day_start = now_local.replace(hour=0, minute=0, second=0, microsecond=0)
    window_start = day_start + timedelta(minutes=window.start_minute)
    window_end = day_start + timedelta(minutes=window.end_minute)

    if now_local < window_start:
        return window_start
    if now_local >= window_end:
        return window_start + timedelta(days=1)

    step = timedelta(minutes=window.step_minutes)
    k = (now_local - window_start) // step
    candidate = window_start + k * step
    if candidate <= now_local:
        candidate += step

    return candidate if candidate < window_end else window_start + timedelta(days=1)


def compute_next_fire(
    schedule: ScheduleDefinition,
    utc_offset: timedelta,
    now: datetime,
) -> datetime:
    """Compute the next UTC fire instant strictly after ``now``.

    :param schedule: The reminder's schedule.
    :param utc_offset: The owner's fixed UTC offset. Malformed values count as zero.
    :param now: Reference instant. Naive values are treated as UTC.
    :returns: Next fire instant, timezone-aware in UTC.
    :raises UnsupportedScheduleError: If ``schedule`` is not a known variant.
    """
    local_tz = timezone(normalise_offset(utc_offset))
    now_local = ensure_utc(now).astimezone(local_tz)

    match schedule:
        case DailyAtTime(minute_of_day=minute):
            next_local = _next_daily(now_local, minute)
        case IntervalWindow():
            next_local = _next_in_window(now_local, schedule)
        case _:
            raise UnsupportedScheduleError(f"Unsupported schedule: {schedule!r}")

    return next_local.astimezone(UTC)


def next_fire_or_fallback(
    schedule: ScheduleDefinition | None,
    utc_offset: timedelta,
    now: datetime,
) -> datetime:
    """Compute the next fire instant, postponing one day if the schedule is unusable.

    :param schedule: The reminder's schedule, or None if it could not be rebuilt.
    :param utc_offset: The owner's fixed UTC offset.
    :param now: Reference instant.
    :returns: Next fire instant in UTC.
    """
    if schedule is None:
        logger.warning("Schedule could not be resolved, postponing by one day")
        return ensure_utc(now) + FALLBACK_DELAY

    try:
        return compute_next_fire(schedule, utc_offset, now)
    except UnsupportedScheduleError as e:
        logger.warning(f"{e}, postponing by one day")
        return ensure_utc(now) + FALLBACK_DELAY


def build_schedule(
    schedule_type: str | None,
    *,
    daily_time_minutes: int | None = None,
    window_start_minutes: int | None = None,
    window_end_minutes: int | None = None,
    every_minutes: int | None = None,
) -> ScheduleDefinition | None:
    """Rebuild a schedule from its stored columns.

    :returns: The schedule, or None when the columns do not form a valid variant.
    """
    try:
        if schedule_type == ScheduleType.DAILY_AT_TIME and daily_time_minutes is not None:
            return DailyAtTime(daily_time_minutes)
        if (
            schedule_type == ScheduleType.INTERVAL_WINDOW
            and window_start_minutes is not None
            and window_end_minutes is not None
            and every_minutes is not None
        ):
            return IntervalWindow(window_start_minutes, window_end_minutes, every_minutes)
    except ValueError as e:
        logger.warning(f"Invalid stored schedule ({schedule_type}): {e}")
    return None


def describe_schedule(schedule: ScheduleDefinition | None) -> str:
    """Return a short human-readable description of a schedule."""
    match schedule:
        case DailyAtTime(minute_of_day=minute):
            return f"daily at {minute // 60:02d}:{minute % 60:02d}"
        case IntervalWindow(start_minute=start, end_minute=end, step_minutes=step):
            return (
                f"every {step} min between {start // 60:02d}:{start % 60:02d} "
                f"and {end // 60:02d}:{end % 60:02d}"
            )
        case _:
            return "unknown schedule"
