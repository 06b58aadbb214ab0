"""SQLAlchemy ORM models."""

from translation_hub.models.base import Base
from translation_hub.models.translation import AuditLog, LanguageStat, Translation
from translation_hub.models.user import User, UserSession

__all__ = ["AuditLog", "Base", "LanguageStat", "Translation", "User", "UserSession"]
