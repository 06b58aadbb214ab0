"""In-memory credential store for tests and local experiments."""

import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime

from translation_hub.stores.credential_store import UserRecord


@dataclass(frozen=True)
class SessionRow:
    session_id: uuid.UUID
    user_id: uuid.UUID
    expires_at: datetime
    token: str
    created_at: datetime | None = None


class InMemoryCredentialStore:
    """
    Dict-backed credential store with the same contract as the SQL store.

    A single lock serialises every call, which gives the unique-email
    guarantee a database index would.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users_by_email: dict[str, UserRecord] = {}
        self._sessions_by_token: dict[str, SessionRow] = {}
        self.last_login: dict[uuid.UUID, datetime] = {}

    @property
    def users(self) -> list[UserRecord]:
        with self._lock:
            return list(self._users_by_email.values())

    @property
    def sessions(self) -> list[SessionRow]:
        with self._lock:
            return list(self._sessions_by_token.values())

    def create_user(self, email: str, password_hash: str) -> bool:
        with self._lock:
            if email in self._users_by_email:
                return False
            self._users_by_email[email] = UserRecord(
                id=uuid.uuid4(), email=email, password_hash=password_hash
            )
            return True

    def find_user_by_email(self, email: str) -> UserRecord | None:
        with self._lock:
            return self._users_by_email.get(email)

    def update_preferences(
        self, user_id: uuid.UUID, default_from_lang: str | None, default_to_lang: str | None
    ) -> None:
        with self._lock:
            user = self._find_by_id(user_id)
            if user is None:
                return
            self._users_by_email[user.email] = replace(
                user, default_from_lang=default_from_lang, default_to_lang=default_to_lang
            )

    def record_login(self, user_id: uuid.UUID, at: datetime) -> None:
        with self._lock:
            self.last_login[user_id] = at

    def create_session(
        self,
        user_id: uuid.UUID,
        session_id: uuid.UUID,
        expires_at: datetime,
        token: str,
        *,
        created_at: datetime | None = None,
    ) -> None:
        with self._lock:
            self._sessions_by_token[token] = SessionRow(
                session_id=session_id,
                user_id=user_id,
                expires_at=expires_at,
                token=token,
                created_at=created_at,
            )

    def find_user_by_valid_session(self, token: str, now: datetime) -> UserRecord | None:
        with self._lock:
            row = self._sessions_by_token.get(token)
            if row is None or row.expires_at <= now:
                return None
            return self._find_by_id(row.user_id)

    def delete_session(self, token: str) -> bool:
        with self._lock:
            return self._sessions_by_token.pop(token, None) is not None

    def delete_user_sessions(self, user_id: uuid.UUID) -> int:
        with self._lock:
            tokens = [t for t, row in self._sessions_by_token.items() if row.user_id == user_id]
            for token in tokens:
                del self._sessions_by_token[token]
            return len(tokens)

    def delete_expired_sessions(self, now: datetime) -> int:
        with self._lock:
            tokens = [t for t, row in self._sessions_by_token.items() if row.expires_at <= now]
            for token in tokens:
                del self._sessions_by_token[token]
            return len(tokens)

    def _find_by_id(self, user_id: uuid.UUID) -> UserRecord | None:
        return next((u for u in self._users_by_email.values() if u.id == user_id), None)
