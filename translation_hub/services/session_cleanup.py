"""Session cleanup: delete session rows whose expiry has passed."""

import logging
from datetime import datetime

from translation_hub.core.tokens import utc_now
from translation_hub.stores.credential_store import CredentialStore

logger = logging.getLogger(__name__)


def run_session_cleanup(store: CredentialStore, now: datetime | None = None) -> int:
    """
    Delete expired session rows and return how many were removed.

    Expired rows are already rejected by validation; this only reclaims
    space. Idempotent: safe to run repeatedly.
    """
    cutoff = now or utc_now()
    deleted_count = store.delete_expired_sessions(cutoff)
    if deleted_count > 0:
        logger.info(
            "Session cleanup run: cutoff=%s, sessions_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
