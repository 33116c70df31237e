"""Alembic environment for the reminder scheduler schema."""

from logging.config import fileConfig

from dotenv import load_dotenv
from sqlalchemy.engine import Engine

from alembic import context
from src.database.connection import create_db_engine, get_database_url
from src.database.core import Base
from src.database.owners.models import OwnerProfile
from src.database.reminders.models import Reminder
from src.database.telegram.models import TelegramPollingCursor
from src.paths import ENV_FILE

load_dotenv(ENV_FILE)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Importing the models registers their tables on the shared metadata
MANAGED_TABLES = frozenset(
    model.__tablename__ for model in (Reminder, OwnerProfile, TelegramPollingCursor)
)
target_metadata = Base.metadata


def include_object(
    obj: object,
    name: str | None,
    type_: str,
    reflected: bool,
    compare_to: object,
) -> bool:
    """Only autogenerate changes for this project's tables."""
    if type_ == "table":
        return name in MANAGED_TABLES
    return True


def run_migrations_offline() -> None:
    """Emit migration SQL to the script output without a database connection."""
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against the configured database."""
    engine: Engine = create_db_engine()

    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_object=include_object,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()

    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
