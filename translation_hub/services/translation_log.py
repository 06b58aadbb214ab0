"""Translation history: per-user CRUD over saved translations, language statistics, audit trail and preferences."""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session, sessionmaker

from translation_hub.core.database import as_utc, session_scope
from translation_hub.core.tokens import utc_now
from translation_hub.models import AuditLog, LanguageStat, Translation, User
from translation_hub.schemas.translation import (
    TRANSLATION_KINDS,
    AuditLogRecord,
    LanguageStatRecord,
    PreferencesUpdate,
    TranslationCreate,
    TranslationRecord,
)

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_LOG_LIMIT = 100
MAX_AUDIT_LOG_LIMIT = 1000


class TranslationLogError(Exception):
    """Raised for invalid history requests (unknown kind, bad limit)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class TranslationNotFoundError(TranslationLogError):
    """Raised when a translation does not exist or belongs to another user."""


def _check_kind(kind: str) -> None:
    if kind not in TRANSLATION_KINDS:
        raise TranslationLogError(
            f"Unknown translation kind '{kind}'; expected one of {', '.join(TRANSLATION_KINDS)}."
        )


def _to_translation_record(row: Translation) -> TranslationRecord:
    record = TranslationRecord.model_validate(row)
    return record.model_copy(update={"created_at": as_utc(record.created_at)})


class TranslationLogService:
    """
    Stores translation history for authenticated users.

    Every method takes the user id resolved by SessionManager.validate and
    only ever touches that user's rows.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def save_translation(
        self, user_id: uuid.UUID, kind: str, entry: TranslationCreate
    ) -> TranslationRecord:
        """Insert a translation, bump the pair statistic and audit it in one transaction."""
        _check_kind(kind)
        now = self._clock()
        with session_scope(self._session_factory) as session:
            row = Translation(
                id=uuid.uuid4(),
                user_id=user_id,
                kind=kind,
                from_lang=entry.from_lang,
                to_lang=entry.to_lang,
                original_text=entry.original_text,
                translated_text=entry.translated_text,
                type=entry.type,
                created_at=now,
            )
            session.add(row)
            self._bump_statistic(session, user_id, entry.from_lang, entry.to_lang)
            self._add_audit(
                session,
                user_id,
                "save_translation",
                "translations",
                record_id=str(row.id),
                details=f"{kind}:{entry.from_lang}->{entry.to_lang}",
            )
            session.flush()
            record = _to_translation_record(row)
        logger.info(
            "Translation saved",
            extra={"user_id": str(user_id), "kind": kind, "translation_id": str(record.id)},
        )
        return record

    def list_translations(self, user_id: uuid.UUID, kind: str) -> list[TranslationRecord]:
        """Return the user's translations of one kind, newest first."""
        _check_kind(kind)
        with session_scope(self._session_factory) as session:
            rows = (
                session.query(Translation)
                .filter(Translation.user_id == user_id, Translation.kind == kind)
                .order_by(Translation.created_at.desc())
                .all()
            )
            return [_to_translation_record(r) for r in rows]

    def delete_translation(self, user_id: uuid.UUID, translation_id: uuid.UUID) -> None:
        """Delete one of the user's translations. Raises TranslationNotFoundError otherwise."""
        with session_scope(self._session_factory) as session:
            deleted = (
                session.query(Translation)
                .filter(Translation.id == translation_id, Translation.user_id == user_id)
                .delete(synchronize_session=False)
            )
            if deleted == 0:
                raise TranslationNotFoundError("Translation not found.")
            self._add_audit(
                session, user_id, "delete_translation", "translations", record_id=str(translation_id)
            )

    def clear_translations(self, user_id: uuid.UUID) -> int:
        """Delete all of the user's translations; returns the number removed."""
        with session_scope(self._session_factory) as session:
            deleted = (
                session.query(Translation)
                .filter(Translation.user_id == user_id)
                .delete(synchronize_session=False)
            )
            self._add_audit(
                session, user_id, "clear_translations", "translations", details=f"deleted={deleted}"
            )
        logger.info("Translations cleared", extra={"user_id": str(user_id), "deleted": deleted})
        return deleted

    def get_statistics(self, user_id: uuid.UUID) -> list[LanguageStatRecord]:
        """Per language pair translation counts, most used first."""
        with session_scope(self._session_factory) as session:
            rows = (
                session.query(LanguageStat)
                .filter(LanguageStat.user_id == user_id)
                .order_by(
                    LanguageStat.translation_count.desc(),
                    LanguageStat.from_lang,
                    LanguageStat.to_lang,
                )
                .all()
            )
            return [LanguageStatRecord.model_validate(r) for r in rows]

    def get_audit_logs(
        self, user_id: uuid.UUID, limit: int = DEFAULT_AUDIT_LOG_LIMIT
    ) -> list[AuditLogRecord]:
        """Most recent audit entries for the user, newest first."""
        if limit < 1 or limit > MAX_AUDIT_LOG_LIMIT:
            raise TranslationLogError(f"limit must be between 1 and {MAX_AUDIT_LOG_LIMIT}.")
        with session_scope(self._session_factory) as session:
            rows = (
                session.query(AuditLog)
                .filter(AuditLog.user_id == user_id)
                .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
                .limit(limit)
                .all()
            )
            records = [AuditLogRecord.model_validate(r) for r in rows]
        return [r.model_copy(update={"created_at": as_utc(r.created_at)}) for r in records]

    def update_preferences(self, user_id: uuid.UUID, prefs: PreferencesUpdate) -> None:
        """Set the user's default languages. The next validate() reflects them."""
        with session_scope(self._session_factory) as session:
            updated = (
                session.query(User)
                .filter(User.id == user_id)
                .update(
                    {
                        User.default_from_lang: prefs.default_from_lang,
                        User.default_to_lang: prefs.default_to_lang,
                    },
                    synchronize_session=False,
                )
            )
            if updated == 0:
                raise TranslationLogError("User not found.")
            self._add_audit(
                session,
                user_id,
                "update_preferences",
                "users",
                details=f"{prefs.default_from_lang}->{prefs.default_to_lang}",
            )

    def record_audit(
        self,
        user_id: uuid.UUID,
        action: str,
        table_name: str,
        record_id: str | None = None,
        details: str | None = None,
    ) -> None:
        """Append an audit entry in its own transaction (used by SessionManager)."""
        with session_scope(self._session_factory) as session:
            self._add_audit(session, user_id, action, table_name, record_id=record_id, details=details)

    def _add_audit(
        self,
        session: Session,
        user_id: uuid.UUID,
        action: str,
        table_name: str,
        record_id: str | None = None,
        details: str | None = None,
    ) -> None:
        session.add(
            AuditLog(
                user_id=user_id,
                action=action,
                table_name=table_name,
                record_id=record_id,
                details=details,
                created_at=self._clock(),
            )
        )

    @staticmethod
    def _bump_statistic(session: Session, user_id: uuid.UUID, from_lang: str, to_lang: str) -> None:
        updated = (
            session.query(LanguageStat)
            .filter(
                LanguageStat.user_id == user_id,
                LanguageStat.from_lang == from_lang,
                LanguageStat.to_lang == to_lang,
            )
            .update(
                {LanguageStat.translation_count: LanguageStat.translation_count + 1},
                synchronize_session=False,
            )
        )
        if updated == 0:
            session.add(
                LanguageStat(
                    user_id=user_id, from_lang=from_lang, to_lang=to_lang, translation_count=1
                )
            )
