"""ORM models for translation history, per-pair usage statistics and the audit trail."""

import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)

from translation_hub.models.base import Base


class Translation(Base):
    """
    One saved translation. kind separates text history from voice history;
    type is the client's own tag for where the text came from.
    """

    __tablename__ = "translations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    kind = Column(String(16), nullable=False, index=True)
    from_lang = Column(String(16), nullable=False)
    to_lang = Column(String(16), nullable=False)
    original_text = Column(Text, nullable=False)
    translated_text = Column(Text, nullable=False)
    type = Column(String(64), nullable=False, default="manual")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class LanguageStat(Base):
    """Running count of saved translations per (user, from_lang, to_lang)."""

    __tablename__ = "language_stats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    from_lang = Column(String(16), nullable=False)
    to_lang = Column(String(16), nullable=False)
    translation_count = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("user_id", "from_lang", "to_lang", name="uq_language_stats_pair"),
    )


class AuditLog(Base):
    """Append-only record of user actions."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    action = Column(String(64), nullable=False)
    table_name = Column(String(64), nullable=False)
    record_id = Column(String(64), nullable=True)
    details = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
