"""
CLI entrypoint for the expired-session cleanup job. Run from cron, e.g.:

  python -m translation_hub.cleanup

Or hourly: 0 * * * * cd /path/to/translation-hub && .venv/bin/python -m translation_hub.cleanup
"""

import logging
import sys

from dotenv import load_dotenv

from translation_hub.core.config import get_settings
from translation_hub.core.database import build_engine, build_sessionmaker
from translation_hub.services.session_cleanup import run_session_cleanup
from translation_hub.stores.sqlalchemy_credential_store import SqlAlchemyCredentialStore

logger = logging.getLogger(__name__)


def main() -> int:
    """Delete session rows whose expires_at has passed."""
    load_dotenv()
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    engine = build_engine(settings)
    try:
        store = SqlAlchemyCredentialStore(build_sessionmaker(engine))
        sessions_deleted = run_session_cleanup(store)
        logger.info("Session cleanup completed: sessions_deleted=%s", sessions_deleted)
        return 0
    except Exception as e:
        logger.exception("Session cleanup job failed: %s", e)
        return 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
