"""Credential store interface: persistence of users and session rows used by the session manager."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class CredentialStoreError(Exception):
    """Base error for credential store failures other than ordinary 'not found' outcomes."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class CredentialStoreUnavailableError(CredentialStoreError):
    """Raised when the store is unreachable or a call timed out. Never means 'invalid credentials'."""


@dataclass(frozen=True)
class UserRecord:
    """User row as seen by the session manager."""

    id: uuid.UUID
    email: str
    password_hash: str
    default_from_lang: str | None = None
    default_to_lang: str | None = None


class CredentialStore(Protocol):
    def create_user(self, email: str, password_hash: str) -> bool:
        """Insert a user; False if the email is already taken."""
        ...

    def find_user_by_email(self, email: str) -> UserRecord | None: ...

    def record_login(self, user_id: uuid.UUID, at: datetime) -> None: ...

    def create_session(
        self,
        user_id: uuid.UUID,
        session_id: uuid.UUID,
        expires_at: datetime,
        token: str,
        *,
        created_at: datetime | None = None,
    ) -> None: ...

    def find_user_by_valid_session(self, token: str, now: datetime) -> UserRecord | None:
        """Owner of the session row storing exactly this token, if the row exists and expires_at > now."""
        ...

    def delete_session(self, token: str) -> bool:
        """Delete the session row for token; False (not an error) if there was none."""
        ...

    def delete_user_sessions(self, user_id: uuid.UUID) -> int: ...

    def delete_expired_sessions(self, now: datetime) -> int: ...
