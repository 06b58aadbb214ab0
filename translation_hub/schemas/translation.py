"""Pydantic schemas for translation history, statistics, audit logs and preferences."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TranslationKind = Literal["text", "voice"]
TRANSLATION_KINDS: tuple[str, ...] = ("text", "voice")


class TranslationCreate(BaseModel):
    """A translation the client wants kept in its history."""

    from_lang: str = Field(..., min_length=1, max_length=16, description="Source language code")
    to_lang: str = Field(..., min_length=1, max_length=16, description="Target language code")
    original_text: str = Field(..., min_length=1, description="Text before translation")
    translated_text: str = Field(..., description="Text after translation")
    type: str = Field(
        default="manual",
        min_length=1,
        max_length=64,
        description="Client tag for the input source (e.g. manual, camera, file).",
    )


class TranslationRecord(BaseModel):
    """Saved translation as returned to the owner."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    kind: TranslationKind
    from_lang: str
    to_lang: str
    original_text: str
    translated_text: str
    type: str
    created_at: datetime


class LanguageStatRecord(BaseModel):
    """Number of saved translations for one language pair."""

    model_config = ConfigDict(from_attributes=True)

    from_lang: str
    to_lang: str
    translation_count: int


class AuditLogRecord(BaseModel):
    """One audit trail entry."""

    model_config = ConfigDict(from_attributes=True)

    action: str
    table_name: str
    record_id: str | None = None
    details: str | None = None
    created_at: datetime


class PreferencesUpdate(BaseModel):
    """New default languages; None clears a default."""

    default_from_lang: str | None = Field(default=None, max_length=16)
    default_to_lang: str | None = Field(default=None, max_length=16)
