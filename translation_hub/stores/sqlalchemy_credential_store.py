"""SQLAlchemy-backed credential store over the users and sessions tables."""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from translation_hub.core.database import session_scope
from translation_hub.models import User, UserSession
from translation_hub.stores.credential_store import (
    CredentialStoreUnavailableError,
    UserRecord,
)

logger = logging.getLogger(__name__)

# Driver-level failures that mean the database could not answer (down, unreachable, timed out).
UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


def _to_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        default_from_lang=row.default_from_lang,
        default_to_lang=row.default_to_lang,
    )


class SqlAlchemyCredentialStore:
    """
    Credential store using one short-lived ORM session per call.

    Connectivity and timeout errors are re-raised as
    CredentialStoreUnavailableError; a duplicate email on insert is the only
    integrity error absorbed (create_user returns False).
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _scope(self, operation: str) -> Iterator[Session]:
        try:
            with session_scope(self._session_factory) as session:
                yield session
        except UNAVAILABLE_ERRORS as e:
            logger.error(
                "Credential store unavailable",
                extra={"operation": operation, "error": type(e).__name__},
            )
            raise CredentialStoreUnavailableError(
                f"Credential store unavailable during {operation}.",
                cause=e,
            ) from e

    def create_user(self, email: str, password_hash: str) -> bool:
        try:
            with self._scope("create_user") as session:
                session.add(User(email=email, password_hash=password_hash))
                session.flush()
        except IntegrityError:
            logger.info("User creation rejected: email already registered")
            return False
        return True

    def find_user_by_email(self, email: str) -> UserRecord | None:
        with self._scope("find_user_by_email") as session:
            row = session.query(User).filter(User.email == email).first()
            return _to_record(row) if row else None

    def record_login(self, user_id: uuid.UUID, at: datetime) -> None:
        with self._scope("record_login") as session:
            session.query(User).filter(User.id == user_id).update(
                {User.last_login_at: at}, synchronize_session=False
            )

    def create_session(
        self,
        user_id: uuid.UUID,
        session_id: uuid.UUID,
        expires_at: datetime,
        token: str,
        *,
        created_at: datetime | None = None,
    ) -> None:
        row = UserSession(
            session_id=session_id,
            user_id=user_id,
            token=token,
            expires_at=expires_at,
        )
        if created_at is not None:
            row.created_at = created_at
        with self._scope("create_session") as session:
            session.add(row)

    def find_user_by_valid_session(self, token: str, now: datetime) -> UserRecord | None:
        with self._scope("find_user_by_valid_session") as session:
            row = (
                session.query(User)
                .join(UserSession, UserSession.user_id == User.id)
                .filter(UserSession.token == token, UserSession.expires_at > now)
                .first()
            )
            return _to_record(row) if row else None

    def delete_session(self, token: str) -> bool:
        with self._scope("delete_session") as session:
            deleted = (
                session.query(UserSession)
                .filter(UserSession.token == token)
                .delete(synchronize_session=False)
            )
            return deleted > 0

    def delete_user_sessions(self, user_id: uuid.UUID) -> int:
        with self._scope("delete_user_sessions") as session:
            return (
                session.query(UserSession)
                .filter(UserSession.user_id == user_id)
                .delete(synchronize_session=False)
            )

    def delete_expired_sessions(self, now: datetime) -> int:
        with self._scope("delete_expired_sessions") as session:
            return (
                session.query(UserSession)
                .filter(UserSession.expires_at <= now)
                .delete(synchronize_session=False)
            )
