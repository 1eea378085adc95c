"""Client for the Google Generative Language API (transcription and voice filters)."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.config import get_settings
from app.errors import ExternalServiceError, ExternalServiceKind
from app.models.post import VoiceFilter

logger = logging.getLogger("voz_social")

TRANSCRIPTION_PROMPT = (
    "Transcribe this audio recording verbatim in {language}. "
    "Return only the transcript text, without comments or formatting."
)


@dataclass
class VoiceTransformResult:
    """Outcome of a voice filter request.

    ``available`` is False when the provider cannot apply the filter and the
    original audio was returned instead.
    """

    audio_base64: str
    mime_type: str
    voice_filter: VoiceFilter
    available: bool = True
    message: str | None = None

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.audio_base64}"


class TranscriptionClient:
    """Calls ``models/{model}:generateContent`` with inline base64 audio."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = settings.GOOGLE_AI_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.GOOGLE_AI_BASE_URL).rstrip("/")
        self.model = model or settings.GOOGLE_AI_MODEL
        self.temperature = settings.TRANSCRIPTION_TEMPERATURE
        self.max_output_tokens = settings.TRANSCRIPTION_MAX_OUTPUT_TOKENS
        timeout = settings.TRANSCRIPTION_TIMEOUT_SECONDS if timeout is None else timeout
        self._http = http_client or httpx.Client(timeout=timeout)

    def build_transcription_request(self, audio_base64: str, mime_type: str, language_hint: str) -> dict[str, Any]:
        """Request body for a deterministic transcription call."""
        return {
            "contents": [
                {
                    "parts": [
                        {"text": TRANSCRIPTION_PROMPT.format(language=language_hint)},
                        {"inlineData": {"mimeType": mime_type, "data": audio_base64}},
                    ]
                }
            ],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }

    def transcribe(self, audio_base64: str, mime_type: str = "audio/webm", language_hint: str = "pt-BR") -> str:
        """Transcribe base64 audio. Raises ExternalServiceError on any provider failure."""
        if not self.api_key:
            raise ExternalServiceError(ExternalServiceKind.UNAUTHORIZED, "Transcription API key is not configured")

        logger.debug("Requesting transcription (%s, %d base64 chars)", mime_type, len(audio_base64))
        body = self._post_generate_content(self.build_transcription_request(audio_base64, mime_type, language_hint))
        text = self._extract_text(body)
        logger.info("Transcription received (%d chars)", len(text))
        return text

    def transform_voice(
        self,
        audio_base64: str,
        mime_type: str,
        voice_filter: VoiceFilter,
        transcript: str | None = None,
    ) -> VoiceTransformResult:
        """Apply a voice filter.

        NATURAL is the identity transform. ROBOTIC has no provider support
        yet, so the original audio comes back flagged as unavailable.
        """
        if voice_filter == VoiceFilter.NATURAL:
            return VoiceTransformResult(audio_base64=audio_base64, mime_type=mime_type, voice_filter=voice_filter)

        logger.warning("Voice filter %s is not supported by the provider; returning original audio", voice_filter.value)
        return VoiceTransformResult(
            audio_base64=audio_base64,
            mime_type=mime_type,
            voice_filter=voice_filter,
            available=False,
            message=f"Voice filter {voice_filter.value} is unavailable; original audio returned",
        )

    def _post_generate_content(self, payload: dict[str, Any]) -> Any:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        try:
            response = self._http.post(
                url,
                json=payload,
                headers={"x-goog-api-key": self.api_key, "Content-Type": "application/json"},
            )
        except httpx.TimeoutException as e:
            raise ExternalServiceError(ExternalServiceKind.TIMEOUT, "Transcription service timed out") from e
        except httpx.TransportError as e:
            raise ExternalServiceError(
                ExternalServiceKind.UNREACHABLE, f"Transcription service unreachable: {e}"
            ) from e

        status = response.status_code
        if status in (401, 403):
            raise ExternalServiceError(
                ExternalServiceKind.UNAUTHORIZED, "Transcription service rejected the credentials", status
            )
        if status == 429:
            raise ExternalServiceError(ExternalServiceKind.RATE_LIMITED, "Transcription service rate limit hit", status)
        if status >= 400:
            raise ExternalServiceError(
                ExternalServiceKind.UPSTREAM_ERROR, f"Transcription service returned HTTP {status}", status
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error("Transcription response is not valid JSON")
            raise ExternalServiceError(
                ExternalServiceKind.PARSE_FAILURE, "Transcription response is not valid JSON", status
            ) from e

    @staticmethod
    def _extract_text(body: Any) -> str:
        """Return ``candidates[0].content.parts[0].text``."""
        try:
            text = body["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None
        if not isinstance(text, str):
            logger.error("Transcription response has an unexpected shape")
            raise ExternalServiceError(
                ExternalServiceKind.MALFORMED_RESPONSE, "Transcription response has no candidate text"
            )
        return text.strip()


_transcription_client: TranscriptionClient | None = None


def get_transcription_client() -> TranscriptionClient:
    """Get singleton transcription client instance."""
    global _transcription_client
    if _transcription_client is None:
        _transcription_client = TranscriptionClient()
    return _transcription_client
