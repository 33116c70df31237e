"""Create reminder tables

Revision ID: a7c1e2d3f4b5
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a7c1e2d3f4b5"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "reminders",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.BigInteger(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("message", sa.Text(), nullable=False, server_default=""),
        sa.Column("schedule_type", sa.String(length=32), nullable=False),
        sa.Column("daily_time_minutes", sa.Integer(), nullable=True),
        sa.Column("window_start_minutes", sa.Integer(), nullable=True),
        sa.Column("window_end_minutes", sa.Integer(), nullable=True),
        sa.Column("every_minutes", sa.Integer(), nullable=True),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("awaiting_ack", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("active_cycle_token", sa.String(length=64), nullable=True),
        sa.Column("next_fire_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_fired_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_acknowledged_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_reminders_enabled_next_fire",
        "reminders",
        ["is_enabled", "next_fire_at"],
        unique=False,
    )
    op.create_index(
        "idx_reminders_owner_id",
        "reminders",
        ["owner_id"],
        unique=False,
    )

    op.create_table(
        "owner_profiles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("telegram_user_id", sa.BigInteger(), nullable=False),
        sa.Column("chat_id", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("timezone_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("telegram_user_id"),
    )

    op.create_table(
        "telegram_polling_cursor",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("last_update_id", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("telegram_polling_cursor")
    op.drop_table("owner_profiles")
    op.drop_index("idx_reminders_owner_id", table_name="reminders")
    op.drop_index("idx_reminders_enabled_next_fire", table_name="reminders")
    op.drop_table("reminders")
