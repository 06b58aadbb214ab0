"""Signed session tokens: issue and verify HMAC-signed JWTs carrying {id, email, iat, exp, jti}."""

import binascii
import logging
import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import jwt
from jwt.utils import base64url_decode, base64url_encode

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["id", "email", "iat", "exp", "jti"]

# Compact JWS: header.payload.signature, each base64url without padding.
_SEGMENT_RE = re.compile(r"[A-Za-z0-9_-]+")


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class TokenClaims:
    """Claims recovered from a verified token."""

    user_id: uuid.UUID
    email: str
    issued_at: datetime
    expires_at: datetime
    token_id: uuid.UUID


def _is_canonical_segment(segment: str) -> bool:
    """
    True if segment is strict base64url that re-encodes to itself.

    The decoder ignores the unused low bits of the final character, so two
    different strings can decode to the same signature bytes; rejecting
    non-canonical input makes every character of the token significant.
    """
    if not _SEGMENT_RE.fullmatch(segment):
        return False
    try:
        decoded = base64url_decode(segment)
    except (binascii.Error, ValueError):
        return False
    return base64url_encode(decoded).decode("ascii") == segment


class TokenCodec:
    """
    Issue and verify time-limited bearer tokens.

    Pure apart from the clock: the secret, algorithm and TTL are fixed at
    construction. Expiry has zero tolerance; a token is valid while
    now < exp and invalid from exp onwards.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("Token secret must be non-empty")
        if ttl_seconds < 1:
            raise ValueError("Token TTL must be at least one second")
        self._secret = secret
        self._ttl_seconds = ttl_seconds
        self._algorithm = algorithm
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def expiry_for(self, issued_at: datetime) -> datetime:
        """Expiry instant of a token issued at issued_at (whole seconds, UTC)."""
        return datetime.fromtimestamp(int(issued_at.timestamp()) + self._ttl_seconds, UTC)

    def issue(
        self,
        user_id: uuid.UUID,
        email: str,
        *,
        now: datetime | None = None,
        token_id: uuid.UUID | None = None,
    ) -> str:
        """
        Create a signed token for (user_id, email) valid for ttl_seconds from now.

        token_id becomes the jti claim; login passes the session id so every
        session gets a distinct token string.
        """
        issued = int((now or self._clock()).timestamp())
        payload: dict[str, Any] = {
            "id": str(user_id),
            "email": email,
            "iat": issued,
            "exp": issued + self._ttl_seconds,
            "jti": str(token_id or uuid.uuid4()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str | None, *, now: datetime | None = None) -> TokenClaims | None:
        """
        Return the claims of a valid, unexpired token; None otherwise.

        Never raises for bad input: malformed structure, a signature mismatch,
        missing or mistyped claims and expiry are all ordinary None results.
        """
        if not token or not isinstance(token, str):
            return None
        segments = token.split(".")
        if len(segments) != 3 or not all(_is_canonical_segment(s) for s in segments):
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                # Expiry is checked below against the injected clock.
                options={"verify_exp": False, "verify_iat": False, "require": REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            return None

        user_id_raw = payload.get("id")
        email = payload.get("email")
        iat = payload.get("iat")
        exp = payload.get("exp")
        jti = payload.get("jti")
        if not isinstance(user_id_raw, str) or not isinstance(email, str) or not email:
            return None
        if not isinstance(jti, str):
            return None
        # bool is an int subclass; a boolean timestamp is malformed
        if not isinstance(iat, int) or isinstance(iat, bool):
            return None
        if not isinstance(exp, int) or isinstance(exp, bool):
            return None
        try:
            user_id = uuid.UUID(user_id_raw)
            token_id = uuid.UUID(jti)
        except ValueError:
            return None

        current = (now or self._clock()).timestamp()
        if current >= exp:
            return None
        return TokenClaims(
            user_id=user_id,
            email=email,
            issued_at=datetime.fromtimestamp(iat, UTC),
            expires_at=datetime.fromtimestamp(exp, UTC),
            token_id=token_id,
        )
