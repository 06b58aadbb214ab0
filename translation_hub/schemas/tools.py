"""Pydantic schemas for the AI proxy operations and the language catalogue."""

from pydantic import BaseModel, Field


class TranslateRequest(BaseModel):
    """Text to translate; source_lang 'auto' asks the provider to detect it."""

    text: str = Field(..., min_length=1, description="Text to translate")
    target_lang: str = Field(..., min_length=1, max_length=16, description="Target language code")
    source_lang: str | None = Field(
        default="auto",
        max_length=16,
        description="Source language code, or 'auto' / None for detection.",
    )


class TranslateResult(BaseModel):
    translated_text: str
    detected_lang: str


class RecognizeTextRequest(BaseModel):
    """Image for text recognition."""

    image_base64: str = Field(..., min_length=1, description="Base64-encoded JPEG image")


class TextToSpeechRequest(BaseModel):
    """Text to synthesise; voice and model come from settings."""

    text: str = Field(..., min_length=1, description="Text to speak")


class TranscriptionResult(BaseModel):
    text: str = Field(default="", description="Transcribed or recognised text")


class LanguageEntry(BaseModel):
    code: str
    name: str
