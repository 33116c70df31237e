"""SQLAlchemy ORM models for reminder owner profiles."""

from datetime import UTC, datetime

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database.core import Base


class OwnerProfile(Base):
    """ORM model for a reminder owner.

    Maps a Telegram user to the chat reminders are delivered to and to a
    fixed UTC offset (stored as e.g. ``UTC+03:00``). A ``chat_id`` of 0 means
    no delivery destination is known yet.
    """

    __tablename__ = "owner_profiles"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    telegram_user_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        unique=True,
    )
    chat_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )
    timezone_id: Mapped[str | None] = mapped_column(
        String(64),
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
        onupdate=lambda: datetime.now(UTC),
    )

    @property
    def has_destination(self) -> bool:
        """Whether reminders can be delivered to this owner."""
        return bool(self.chat_id)

    def __repr__(self) -> str:
        """Return string representation of the profile."""
        return (
            f"<OwnerProfile(telegram_user_id={self.telegram_user_id}, "
            f"chat_id={self.chat_id}, timezone_id={self.timezone_id})>"
        )
