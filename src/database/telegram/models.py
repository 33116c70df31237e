"""SQLAlchemy ORM model for the acknowledgment bot's polling position."""

from datetime import UTC, datetime

from sqlalchemy import BigInteger, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from src.database.core import Base

# The table holds a single row
POLLING_CURSOR_ID = 1


class TelegramPollingCursor(Base):
    """Highest Telegram update_id the acknowledgment bot has handled.

    Persisting it means a restarted bot resumes after the last button press
    it processed instead of replaying (or dropping) pending callbacks.
    """

    __tablename__ = "telegram_polling_cursor"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        default=POLLING_CURSOR_ID,
    )
    last_update_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    @property
    def next_offset(self) -> int | None:
        """Offset to request from getUpdates, or None before any update was seen."""
        return self.last_update_id + 1 if self.last_update_id > 0 else None

    def __repr__(self) -> str:
        """Return string representation of the cursor."""
        return f"<TelegramPollingCursor(last_update_id={self.last_update_id})>"
