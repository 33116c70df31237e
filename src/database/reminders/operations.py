"""Database operations for user reminders."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from src.database.reminders.models import Reminder
from src.reminders.schedules import (
    DailyAtTime,
    IntervalWindow,
    ScheduleDefinition,
    ScheduleType,
    compute_next_fire,
)

logger = logging.getLogger(__name__)

# Maximum number of due reminders handled in one scheduler tick
DEFAULT_DUE_BATCH_SIZE = 100


def _schedule_columns(schedule: ScheduleDefinition) -> dict[str, object]:
    """Flatten a schedule into its stored columns."""
    match schedule:
        case DailyAtTime(minute_of_day=minute):
            return {
                "schedule_type": ScheduleType.DAILY_AT_TIME.value,
                "daily_time_minutes": minute,
                "window_start_minutes": None,
                "window_end_minutes": None,
                "every_minutes": None,
            }
        case IntervalWindow(start_minute=start, end_minute=end, step_minutes=step):
            return {
                "schedule_type": ScheduleType.INTERVAL_WINDOW.value,
                "daily_time_minutes": None,
                "window_start_minutes": start,
                "window_end_minutes": end,
                "every_minutes": step,
            }
        case _:
            raise ValueError(f"Unsupported schedule: {schedule!r}")


def create_reminder(
    session: Session,
    owner_id: int,
    title: str,
    schedule: ScheduleDefinition,
    utc_offset: timedelta,
    message: str | None = None,
    now: datetime | None = None,
) -> Reminder:
    """Create a new reminder with its first fire instant seeded from the schedule.

    :param session: Database session.
    :param owner_id: Telegram user ID of the owner.
    :param title: Short reminder title.
    :param schedule: When the reminder fires.
    :param utc_offset: The owner's fixed UTC offset.
    :param message: Text to send. Defaults to the title.
    :param now: Current time (defaults to now).
    :returns: The created reminder.
    """
    if now is None:
        now = datetime.now(UTC)

    reminder = Reminder(
        owner_id=owner_id,
        title=title,
        message=message if message is not None else title,
        next_fire_at=compute_next_fire(schedule, utc_offset, now),
        is_enabled=True,
        awaiting_ack=False,
        created_at=now,
        updated_at=now,
        **_schedule_columns(schedule),
    )
    session.add(reminder)
    session.flush()
    logger.info(
        f"Created reminder: id={reminder.id}, owner_id={owner_id}, "
        f"next_fire_at={reminder.next_fire_at}"
    )
    return reminder


def get_due_reminders(
    session: Session,
    now: datetime | None = None,
    limit: int = DEFAULT_DUE_BATCH_SIZE,
) -> list[Reminder]:
    """Get enabled reminders whose fire instant has passed, oldest first.

    Rows are locked for the rest of the transaction. Rows already locked by
    another transaction are skipped and picked up by a later tick.

    :param session: Database session.
    :param now: Current time (defaults to now).
    :param limit: Maximum number of reminders to return.
    :returns: Due reminders ordered by next_fire_at ascending.
    """
    if now is None:
        now = datetime.now(UTC)

    return (
        session.query(Reminder)
        .filter(
            Reminder.is_enabled.is_(True),
            Reminder.next_fire_at <= now,
        )
        .order_by(Reminder.next_fire_at)
        .limit(limit)
        .with_for_update(skip_locked=True)
        .all()
    )


def get_reminder_for_owner(
    session: Session,
    reminder_id: int,
    owner_id: int,
    *,
    for_update: bool = False,
) -> Reminder | None:
    """Get a reminder by ID, restricted to its owner.

    :param session: Database session.
    :param reminder_id: Reminder ID.
    :param owner_id: Telegram user ID of the owner.
    :param for_update: Lock the row until the transaction ends.
    :returns: The reminder or None if not found.
    """
    query = session.query(Reminder).filter(
        Reminder.id == reminder_id,
        Reminder.owner_id == owner_id,
    )
    if for_update:
        query = query.with_for_update()
    return query.one_or_none()


def list_reminders_for_owner(
    session: Session,
    owner_id: int,
    include_disabled: bool = True,
) -> list[Reminder]:
    """List an owner's reminders in creation order.

    :param session: Database session.
    :param owner_id: Telegram user ID of the owner.
    :param include_disabled: Whether to include disabled reminders.
    :returns: List of reminders.
    """
    query = session.query(Reminder).filter(Reminder.owner_id == owner_id)

    if not include_disabled:
        query = query.filter(Reminder.is_enabled.is_(True))

    return query.order_by(Reminder.id).all()


def set_reminder_enabled(
    session: Session,
    reminder_id: int,
    owner_id: int,
    enabled: bool,
    now: datetime | None = None,
) -> Reminder | None:
    """Enable or disable a reminder.

    A disabled reminder keeps its last computed next_fire_at.

    :param session: Database session.
    :param reminder_id: Reminder ID.
    :param owner_id: Telegram user ID of the owner.
    :param enabled: New enabled state.
    :param now: Current time (defaults to now).
    :returns: The updated reminder or None if not found.
    """
    if now is None:
        now = datetime.now(UTC)

    reminder = get_reminder_for_owner(session, reminder_id, owner_id)
    if reminder is None:
        return None

    reminder.is_enabled = enabled
    reminder.updated_at = now
    session.flush()
    logger.info(f"Set reminder enabled={enabled}: id={reminder_id}")
    return reminder


def delete_reminder(
    session: Session,
    reminder_id: int,
    owner_id: int,
) -> bool:
    """Delete a reminder.

    :param session: Database session.
    :param reminder_id: Reminder ID.
    :param owner_id: Telegram user ID of the owner.
    :returns: True if a reminder was deleted.
    """
    reminder = get_reminder_for_owner(session, reminder_id, owner_id)
    if reminder is None:
        return False

    session.delete(reminder)
    session.flush()
    logger.info(f"Deleted reminder: id={reminder_id}")
    return True


def save_reminders(session: Session, reminders: Sequence[Reminder]) -> None:
    """Stage a batch of mutated reminders for the enclosing transaction.

    Nothing is durable until the session commits, so the batch is written
    as a single unit.

    :param session: Database session.
    :param reminders: Reminders mutated during the batch.
    """
    session.add_all(reminders)
    session.flush()
    logger.debug(f"Flushed {len(reminders)} reminders")
