"""SQLAlchemy ORM models for user reminders."""

from datetime import UTC, datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.database.core import Base
from src.reminders.schedules import ScheduleDefinition, build_schedule

# Maximum length of title to show in repr
REPR_TITLE_MAX_LENGTH = 50


class Reminder(Base):
    """ORM model for a recurring reminder.

    Holds the schedule definition (as discriminated columns), the delivery
    state and the acknowledgment cycle. ``active_cycle_token`` is set if and
    only if ``awaiting_ack`` is true.
    """

    __tablename__ = "reminders"

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )
    owner_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default="",
    )
    message: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    schedule_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
    )
    daily_time_minutes: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    window_start_minutes: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    window_end_minutes: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    every_minutes: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    is_enabled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
    awaiting_ack: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    active_cycle_token: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
    )
    next_fire_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    last_fired_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_acknowledged_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        Index("idx_reminders_enabled_next_fire", "is_enabled", "next_fire_at"),
        Index("idx_reminders_owner_id", "owner_id"),
    )

    @property
    def schedule(self) -> ScheduleDefinition | None:
        """Rebuild the schedule from its columns, or None if they are inconsistent."""
        return build_schedule(
            self.schedule_type,
            daily_time_minutes=self.daily_time_minutes,
            window_start_minutes=self.window_start_minutes,
            window_end_minutes=self.window_end_minutes,
            every_minutes=self.every_minutes,
        )

    @property
    def display_text(self) -> str:
        """Text sent to the owner: the message, or the title when the message is blank."""
        return self.message if self.message and self.message.strip() else self.title

    def __repr__(self) -> str:
        """Return string representation of the reminder."""
        if len(self.title) > REPR_TITLE_MAX_LENGTH:
            title_preview = self.title[:REPR_TITLE_MAX_LENGTH] + "..."
        else:
            title_preview = self.title
        state = "awaiting_ack" if self.awaiting_ack else "idle"
        return f"<Reminder(id={self.id}, title={title_preview!r}, {state})>"
