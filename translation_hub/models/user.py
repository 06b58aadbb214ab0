"""ORM models for user accounts and their login sessions."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, Uuid, func

from translation_hub.models.base import Base


class User(Base):
    """
    User account with default translation languages.

    email is unique as stored (no case folding). password_hash is a bcrypt
    digest and never leaves the store layer.
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    default_from_lang = Column(String(16), nullable=True)
    default_to_lang = Column(String(16), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    last_login_at = Column(DateTime(timezone=True), nullable=True)


class UserSession(Base):
    """
    Server-side record of an issued session token.

    A row exists only while the token it stores is valid for revocation
    purposes: it is deleted on logout and ignored once expires_at has passed.
    """

    __tablename__ = "sessions"

    session_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token = Column(Text, nullable=False, unique=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    __table_args__ = (Index("ix_sessions_token_expires", "token", "expires_at"),)
