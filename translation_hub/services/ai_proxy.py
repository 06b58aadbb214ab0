"""AI proxy: forward translation, OCR, speech and language-detection requests to an OpenAI-compatible API."""

import json
import logging
import time
from typing import TYPE_CHECKING, Any, Literal

import httpx

from translation_hub.schemas.tools import (
    RecognizeTextRequest,
    TextToSpeechRequest,
    TranscriptionResult,
    TranslateRequest,
    TranslateResult,
)

if TYPE_CHECKING:
    from translation_hub.core.config import Settings

logger = logging.getLogger(__name__)

AIProxyErrorStatus = Literal[
    "not_configured",
    "invalid_input",
    "unreachable",
    "timeout",
    "request_failed",
    "bad_status",
    "bad_response",
]

UNKNOWN_LANGUAGE = "unknown"
FALLBACK_SOURCE_LANGUAGE = "en"

DETECT_LANGUAGE_PROMPT = (
    "Detect the primary language of the following text and return only the ISO code "
    "(e.g., 'en', 'he'). If unknown, return 'unknown'."
)
TRANSLATE_PROMPT = "Translate from {source} to {target}. Use transliteration if needed."
IMAGE_TEXT_PROMPT = "Extract visible text from this image. Return only raw text."


class AIProxyError(Exception):
    """
    Raised when the AI provider call cannot complete.

    status tells callers how to map it: unreachable/timeout are service
    unavailability, bad_status/bad_response are upstream faults,
    invalid_input and not_configured are local.
    """

    def __init__(
        self,
        message: str,
        status: AIProxyErrorStatus = "request_failed",
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.status = status
        self.cause = cause
        super().__init__(message)


class AIProxy:
    """Thin async client for chat completions, text-to-speech and transcription."""

    def __init__(self, settings: "Settings") -> None:
        self._settings = settings
        self._base_url = settings.OPENAI_BASE_URL.rstrip("/")
        self._timeout = httpx.Timeout(settings.OPENAI_REQUEST_TIMEOUT_SEC)

    def _auth_headers(self) -> dict[str, str]:
        api_key = self._settings.OPENAI_API_KEY
        if api_key is None or not api_key.get_secret_value().strip():
            raise AIProxyError(
                "AI provider is not configured. Set OPENAI_API_KEY.",
                status="not_configured",
            )
        return {"Authorization": f"Bearer {api_key.get_secret_value()}"}

    async def _post(self, path: str, operation: str, **kwargs: Any) -> httpx.Response:
        headers = self._auth_headers()
        url = f"{self._base_url}/{path}"
        start = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, headers=headers, **kwargs)
        except httpx.ConnectError as e:
            self._log_failure(operation, start)
            raise AIProxyError(
                "AI provider is unreachable. Check network access and OPENAI_BASE_URL.",
                status="unreachable",
                cause=e,
            ) from e
        except httpx.TimeoutException as e:
            self._log_failure(operation, start)
            raise AIProxyError(
                "AI provider request timed out. Try increasing OPENAI_REQUEST_TIMEOUT_SEC.",
                status="timeout",
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            self._log_failure(operation, start)
            raise AIProxyError("AI provider request failed.", cause=e) from e

        logger.info(
            "AI provider request completed",
            extra={
                "operation": operation,
                "latency_seconds": time.perf_counter() - start,
                "status_code": response.status_code,
            },
        )
        if not 200 <= response.status_code < 300:
            raise AIProxyError(
                f"AI provider returned status {response.status_code}.",
                status="bad_status",
            )
        return response

    @staticmethod
    def _log_failure(operation: str, start: float) -> None:
        logger.info(
            "AI provider request failed",
            extra={
                "operation": operation,
                "latency_seconds": time.perf_counter() - start,
                "status": "error",
            },
        )

    @staticmethod
    def _json_body(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except json.JSONDecodeError as e:
            raise AIProxyError(
                "AI provider response body is not valid JSON.",
                status="bad_response",
                cause=e,
            ) from e
        if not isinstance(body, dict):
            raise AIProxyError("AI provider response is not a JSON object.", status="bad_response")
        return body

    async def _chat(self, messages: list[dict[str, Any]], operation: str) -> str:
        payload = {"model": self._settings.OPENAI_CHAT_MODEL, "messages": messages}
        response = await self._post("chat/completions", operation, json=payload)
        body = self._json_body(response)
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIProxyError(
                "AI provider response missing 'choices[0].message.content'.",
                status="bad_response",
                cause=e,
            ) from e
        if not isinstance(content, str):
            raise AIProxyError("AI provider returned non-text content.", status="bad_response")
        return content.strip()

    async def detect_language(self, text: str) -> str:
        """ISO code of the text's primary language, or 'unknown'."""
        raw = await self._chat(
            [
                {"role": "system", "content": DETECT_LANGUAGE_PROMPT},
                {"role": "user", "content": text},
            ],
            "detect_language",
        )
        code = raw.strip().strip("'\".").lower()
        return code or UNKNOWN_LANGUAGE

    async def translate_text(self, source_lang: str, target_lang: str, text: str) -> str:
        return await self._chat(
            [
                {
                    "role": "system",
                    "content": TRANSLATE_PROMPT.format(source=source_lang, target=target_lang),
                },
                {"role": "user", "content": text},
            ],
            "translate",
        )

    async def translate(self, request: TranslateRequest) -> TranslateResult:
        """
        Translate request.text into request.target_lang.

        A missing or 'auto' source language is detected first ('unknown' falls
        back to English). When source and target match the text is echoed
        without a provider call.
        """
        source = (request.source_lang or "").strip() or "auto"
        if source.lower() == "auto":
            source = await self.detect_language(request.text)
            if source == UNKNOWN_LANGUAGE:
                source = FALLBACK_SOURCE_LANGUAGE
        if source == request.target_lang:
            return TranslateResult(translated_text=request.text, detected_lang=source)
        translated = await self.translate_text(source, request.target_lang, request.text)
        return TranslateResult(translated_text=translated, detected_lang=source)

    async def recognize_text_from_image(self, request: RecognizeTextRequest) -> TranscriptionResult:
        """Extract visible text from a base64 JPEG. Empty text when nothing is found."""
        image_base64 = request.image_base64.strip()
        if not image_base64:
            raise AIProxyError("Valid image data is required.", status="invalid_input")
        text = await self._chat(
            [
                {"role": "system", "content": IMAGE_TEXT_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:image/jpeg;base64,{image_base64}"},
                        }
                    ],
                },
            ],
            "recognize_text",
        )
        return TranscriptionResult(text=text)

    async def text_to_speech(self, request: TextToSpeechRequest) -> bytes:
        """Synthesise request.text to MP3 bytes."""
        if not request.text.strip():
            raise AIProxyError("Text cannot be empty.", status="invalid_input")
        payload = {
            "model": self._settings.OPENAI_TTS_MODEL,
            "voice": self._settings.OPENAI_TTS_VOICE,
            "input": request.text,
            "response_format": "mp3",
        }
        response = await self._post("audio/speech", "text_to_speech", json=payload)
        audio = response.content
        if not audio:
            raise AIProxyError("AI provider returned empty audio.", status="bad_response")
        return audio

    async def speech_to_text(
        self,
        audio: bytes,
        filename: str,
        content_type: str = "audio/mpeg",
    ) -> TranscriptionResult:
        """Transcribe an uploaded audio file."""
        if not audio:
            raise AIProxyError("Audio file is required.", status="invalid_input")
        if not content_type.startswith("audio"):
            raise AIProxyError("Invalid audio format.", status="invalid_input")
        response = await self._post(
            "audio/transcriptions",
            "speech_to_text",
            data={"model": self._settings.OPENAI_TRANSCRIPTION_MODEL},
            files={"file": (filename or "audio.mp3", audio, content_type)},
        )
        body = self._json_body(response)
        text = body.get("text")
        if text is None:
            return TranscriptionResult()
        if not isinstance(text, str):
            raise AIProxyError("AI provider transcription is not text.", status="bad_response")
        return TranscriptionResult(text=text.strip())
