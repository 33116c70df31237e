"""Database connection and session management."""

import os
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

# Factory returning a transactional session scope (see get_session)
SessionFactory = Callable[[], AbstractContextManager[Session]]


def get_database_url() -> str:
    """Build the PostgreSQL database URL from environment variables.

    ``DATABASE_URL`` wins when set; otherwise the URL is assembled from
    ``DATABASE_HOST``, ``DATABASE_PORT``, ``DATABASE_USER``, ``APP_DB_PASSWORD``
    and ``DATABASE_NAME``.

    :returns: The database connection URL.
    :raises KeyError: If required environment variables are not set.
    """
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    host = os.environ["DATABASE_HOST"]
    port = os.environ.get("DATABASE_PORT", "5432")
    user = os.environ.get("DATABASE_USER", "reminders")
    password = os.environ["APP_DB_PASSWORD"]
    name = os.environ.get("DATABASE_NAME", "reminders")

    return f"postgresql://{user}:{password}@{host}:{port}/{name}"


def create_db_engine(*, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for the database.

    :param echo: If True, log all SQL statements.
    :returns: A configured SQLAlchemy engine.
    """
    return create_engine(get_database_url(), echo=echo, pool_pre_ping=True)


@dataclass
class _DatabaseState:
    """Container for database connection state."""

    engine: Engine | None = field(default=None)
    session_factory: sessionmaker[Session] | None = field(default=None)


_state = _DatabaseState()


def get_engine() -> Engine:
    """Get or create the database engine singleton.

    :returns: The database engine.
    """
    if _state.engine is None:
        _state.engine = create_db_engine()
    return _state.engine


def get_session_factory() -> sessionmaker[Session]:
    """Get or create the session factory singleton.

    :returns: A sessionmaker bound to the database engine.
    """
    if _state.session_factory is None:
        _state.session_factory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _state.session_factory


@contextmanager
def get_session() -> Iterator[Session]:
    """Open a session scoped to one transaction.

    Commits on successful completion, rolls back on exception, so either
    every change made inside the block is persisted or none is.

    :yields: A database session.
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()

    except Exception:
        session.rollback()
        raise

    finally:
        session.close()


def dispose_engine() -> None:
    """Close pooled connections and forget the engine and session factory."""
    if _state.engine is not None:
        _state.engine.dispose()
    _state.engine = None
    _state.session_factory = None
