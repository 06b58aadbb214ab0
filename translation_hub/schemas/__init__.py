"""Pydantic request/response schemas."""

from translation_hub.schemas.auth import (
    AuthenticatedUser,
    LoginRequest,
    LoginResult,
    RegisterRequest,
)
from translation_hub.schemas.tools import (
    LanguageEntry,
    RecognizeTextRequest,
    TextToSpeechRequest,
    TranscriptionResult,
    TranslateRequest,
    TranslateResult,
)
from translation_hub.schemas.translation import (
    AuditLogRecord,
    LanguageStatRecord,
    PreferencesUpdate,
    TranslationCreate,
    TranslationKind,
    TranslationRecord,
)

__all__ = [
    "AuditLogRecord",
    "AuthenticatedUser",
    "LanguageEntry",
    "LanguageStatRecord",
    "LoginRequest",
    "LoginResult",
    "PreferencesUpdate",
    "RecognizeTextRequest",
    "RegisterRequest",
    "TextToSpeechRequest",
    "TranscriptionResult",
    "TranslateRequest",
    "TranslateResult",
    "TranslationCreate",
    "TranslationKind",
    "TranslationRecord",
]
