"""
Session manager: registration, login, logout and token validation.

Validation is DB-backed: a token is accepted only if its signature and
expiry check out AND its session row still exists, so logout revokes a token
before its natural expiry.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime
from functools import cached_property
from typing import TYPE_CHECKING, Protocol

from pydantic import ValidationError

from translation_hub.core.security import BCRYPT_ROUNDS, hash_password, verify_password
from translation_hub.core.tokens import TokenCodec, utc_now
from translation_hub.schemas.auth import (
    AuthenticatedUser,
    LoginRequest,
    LoginResult,
    RegisterRequest,
)
from translation_hub.stores.credential_store import CredentialStore

if TYPE_CHECKING:
    from translation_hub.core.config import Settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "

# Unknown emails are checked against this so both login failures cost one bcrypt round.
_DUMMY_PASSWORD = "not-a-real-password"


class AuditSink(Protocol):
    def record_audit(
        self,
        user_id: uuid.UUID,
        action: str,
        table_name: str,
        record_id: str | None = None,
        details: str | None = None,
    ) -> None: ...


def strip_bearer(raw: str | None) -> str | None:
    """Return the bare token from an Authorization value with or without 'Bearer '; None if empty."""
    if not isinstance(raw, str):
        return None
    value = raw.strip()
    if value[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        value = value[len(BEARER_PREFIX) :].strip()
    return value or None


def token_fingerprint(token: str) -> str:
    """Short prefix for logs; full tokens are never logged."""
    return token[:8] + "..."


class SessionManager:
    """
    Single authority for establishing and checking identity.

    All operations are total over their input: empty, malformed, expired,
    tampered or revoked input yields False/None. Only store infrastructure
    failures (CredentialStoreUnavailableError) propagate.
    """

    def __init__(
        self,
        store: CredentialStore,
        codec: TokenCodec,
        *,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
        audit: AuditSink | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._codec = codec
        self._bcrypt_rounds = bcrypt_rounds
        self._audit = audit
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        store: CredentialStore,
        settings: "Settings",
        audit: AuditSink | None = None,
    ) -> "SessionManager":
        codec = TokenCodec(
            settings.JWT_SECRET.get_secret_value(),
            settings.SESSION_TTL_SECONDS,
            algorithm=settings.JWT_ALGORITHM,
        )
        return cls(store, codec, bcrypt_rounds=settings.BCRYPT_ROUNDS, audit=audit)

    @cached_property
    def _dummy_hash(self) -> str:
        return hash_password(_DUMMY_PASSWORD, self._bcrypt_rounds)

    def register(self, email: str, password: str) -> bool:
        """Create a user with a bcrypt hash of password. False for blank input or a taken email."""
        try:
            creds = RegisterRequest(email=email, password=password)
        except ValidationError:
            logger.info("Registration rejected: email and password are required")
            return False
        password_hash = hash_password(creds.password, self._bcrypt_rounds)
        created = self._store.create_user(creds.email, password_hash)
        if created:
            logger.info("User registered")
        else:
            logger.info("Registration rejected: email already registered")
        return created

    def login(self, email: str, password: str) -> LoginResult | None:
        """
        Verify credentials and open a session.

        Returns None for any credential failure without saying which part was
        wrong. The session row is written before the token is returned; if that
        write fails the error propagates and no token leaves this method.
        """
        try:
            creds = LoginRequest(email=email, password=password)
        except ValidationError:
            return None

        user = self._store.find_user_by_email(creds.email)
        if user is None:
            verify_password(creds.password, self._dummy_hash)
            logger.info("Login failed: invalid credentials")
            return None
        if not verify_password(creds.password, user.password_hash):
            logger.info("Login failed: invalid credentials")
            return None

        now = self._clock()
        session_id = uuid.uuid4()
        token = self._codec.issue(user.id, user.email, now=now, token_id=session_id)
        self._store.create_session(
            user.id, session_id, self._codec.expiry_for(now), token, created_at=now
        )
        self._store.record_login(user.id, now)
        self._record(user.id, "login", record_id=str(session_id))
        logger.info(
            "Login succeeded",
            extra={"user_id": str(user.id), "session_id": str(session_id)},
        )
        return LoginResult(
            token=token,
            user=AuthenticatedUser(
                id=user.id,
                email=user.email,
                default_from_lang=user.default_from_lang,
                default_to_lang=user.default_to_lang,
            ),
        )

    def validate(self, token: str | None) -> AuthenticatedUser | None:
        """
        Return the user a token identifies, or None.

        Requires a good signature, an unexpired exp claim, and a live session
        row for this exact token owned by the user in the claims. Language
        preferences are read from the user row so changes show up without
        re-login.
        """
        bare = strip_bearer(token)
        if bare is None:
            return None
        now = self._clock()
        claims = self._codec.verify(bare, now=now)
        if claims is None:
            logger.info("Session rejected: invalid or expired token")
            return None
        user = self._store.find_user_by_valid_session(bare, now)
        if user is None or user.id != claims.user_id:
            logger.info(
                "Session rejected: no live session row",
                extra={"token": token_fingerprint(bare)},
            )
            return None
        return AuthenticatedUser(
            id=claims.user_id,
            email=claims.email,
            default_from_lang=user.default_from_lang,
            default_to_lang=user.default_to_lang,
        )

    def logout(self, token: str | None) -> None:
        """Revoke the session behind token. Idempotent; empty or invalid tokens are a no-op."""
        bare = strip_bearer(token)
        if bare is None:
            return
        claims = self._codec.verify(bare, now=self._clock())
        if claims is None:
            return
        if self._store.delete_session(bare):
            self._record(claims.user_id, "logout")
            logger.info("Logout processed", extra={"user_id": str(claims.user_id)})

    def logout_all(self, user_id: uuid.UUID) -> int:
        """Revoke every session of a user (e.g. after a password change). Returns rows removed."""
        removed = self._store.delete_user_sessions(user_id)
        if removed:
            self._record(user_id, "logout_all", details=f"sessions={removed}")
        return removed

    def _record(
        self,
        user_id: uuid.UUID,
        action: str,
        record_id: str | None = None,
        details: str | None = None,
    ) -> None:
        """Write an audit entry. The session change is already committed, so a failed write is only logged."""
        if self._audit is None:
            return
        try:
            self._audit.record_audit(user_id, action, "sessions", record_id=record_id, details=details)
        except Exception:
            logger.exception(
                "Audit write failed",
                extra={"user_id": str(user_id), "action": action},
            )
