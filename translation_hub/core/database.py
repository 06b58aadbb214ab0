"""Database engine construction and transactional session scope."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker

if TYPE_CHECKING:
    from translation_hub.core.config import Settings


def build_engine(settings: "Settings") -> Engine:
    """Create an engine whose connect, checkout and statement waits are bounded by DB_TIMEOUT_SEC."""
    url = settings.DATABASE_URL
    timeout = settings.DB_TIMEOUT_SEC
    kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.DEBUG}
    if url.startswith("sqlite"):
        # check_same_thread=False needed when the engine is shared across request threads
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": timeout}
    else:
        statement_timeout_ms = int(timeout * 1000)
        kwargs["connect_args"] = {
            "connect_timeout": max(1, int(timeout)),
            "options": f"-c statement_timeout={statement_timeout_ms}",
        }
        kwargs["pool_timeout"] = timeout
    return create_engine(url, **kwargs)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; every stored timestamp is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def build_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Yield a session that commits on success, rolls back on error, and always closes."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def check_db_connected(factory: sessionmaker[Session]) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        with session_scope(factory) as session:
            session.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
