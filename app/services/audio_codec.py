"""Decoding and validation of inbound audio payloads.

Two inbound shapes are supported: raw multipart bytes with a declared MIME
type, and ``data:audio/<subtype>;base64,<payload>`` URIs embedded in JSON or
form bodies. Both produce a :class:`RawAudio`.
"""

import base64
import binascii
import re
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from app.config import get_settings
from app.errors import ValidationError

ALLOWED_MIME_TYPES = {"audio/webm", "audio/mp3", "audio/wav", "audio/mpeg"}
BYTES_PER_SECOND = 16 * 1024  # rough WebM/Opus bitrate
DEFAULT_EXTENSION = ".webm"
DATA_URI_PREFIX = "data:audio/"
_EXTENSION_RE = re.compile(r"\.[a-z0-9]{1,10}")


@dataclass
class RawAudio:
    """Decoded audio bytes ready to be stored."""

    data: bytes
    mime_type: str
    original_filename: str | None = None

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


def _normalize_mime(mime_type: str | None) -> str:
    # "audio/webm;codecs=opus" -> "audio/webm"
    return (mime_type or "").split(";", 1)[0].strip().lower()


def max_audio_bytes() -> int:
    """Upload ceiling from MAX_UPLOAD_SIZE_MB (50 MiB by default)."""
    return get_settings().max_upload_bytes


def _check_size(size: int, field: str) -> None:
    if size == 0:
        raise ValidationError("Audio file is empty", {field: "Audio file is required"})
    _check_max_size(size, field)


def _check_max_size(size: int, field: str) -> None:
    limit = max_audio_bytes()
    if size > limit:
        raise ValidationError(
            f"Audio file too large ({size // (1024 * 1024)}MB). Maximum: {limit // (1024 * 1024)}MB",
            {field: "Audio file exceeds the maximum size"},
        )


def decode_upload(data: bytes | None, declared_mime_type: str | None, filename: str | None = None) -> RawAudio:
    """Validate a multipart upload. Raises ValidationError on empty, oversized or unsupported audio."""
    _check_size(len(data or b""), "arquivo")

    mime_type = _normalize_mime(declared_mime_type)
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationError(
            f"Unsupported audio format '{declared_mime_type}'. Allowed: {', '.join(sorted(ALLOWED_MIME_TYPES))}",
            {"arquivo": "Unsupported audio format"},
        )

    return RawAudio(data=data, mime_type=mime_type, original_filename=filename)


def decode_embedded(data_uri: str | None, filename: str | None = None) -> RawAudio:
    """Decode a ``data:audio/<subtype>;base64,<payload>`` URI.

    The MIME type is the text between ``data:`` and the first ``;``.
    """
    field = "audioDataUri"
    if not data_uri or not data_uri.strip():
        raise ValidationError("Audio data is required", {field: "Audio data is required"})

    data_uri = data_uri.strip()
    if not data_uri.startswith(DATA_URI_PREFIX):
        raise ValidationError("Invalid audio data URI", {field: "Must start with 'data:audio/'"})

    header, sep, payload = data_uri.partition(",")
    if not sep or ";" not in header:
        raise ValidationError("Invalid audio data URI", {field: "Expected 'data:audio/<type>;base64,<payload>'"})

    if header.rsplit(";", 1)[1].strip().lower() != "base64":
        raise ValidationError("Invalid audio data URI", {field: "Only base64 encoded data URIs are supported"})

    mime_type = header[len("data:") : header.index(";")].strip().lower()
    if mime_type == "audio/":
        raise ValidationError("Invalid audio data URI", {field: "Missing audio subtype"})

    # 4 base64 chars carry 3 bytes.
    _check_max_size(len(payload) * 3 // 4 - payload.count("=", -2), field)

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid base64 audio payload", {field: "Payload is not valid base64"}) from None

    _check_size(len(data), field)
    return RawAudio(data=data, mime_type=mime_type, original_filename=filename)


def encode_data_uri(data: bytes, mime_type: str) -> str:
    """Inverse of :func:`decode_embedded`."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def estimate_duration(size_bytes: int, max_seconds: float | None = None) -> float:
    """Estimate clip length from its byte size.

    Linear heuristic, not a measurement of the waveform. The result is
    clamped to ``[0, max_seconds]``.
    """
    if max_seconds is None:
        max_seconds = get_settings().MAX_AUDIO_DURATION_SECONDS
    estimate = max(size_bytes, 0) / BYTES_PER_SECOND
    return round(min(max(estimate, 0.0), float(max_seconds)), 2)


def generate_unique_name(original_name: str | None = None) -> str:
    """Collision-resistant stored filename that keeps the original extension."""
    ext = Path(original_name or "").suffix.lower()
    if not _EXTENSION_RE.fullmatch(ext):
        ext = DEFAULT_EXTENSION
    timestamp = datetime.utcnow().strftime("%Y%m%dT%H%M%S%f")
    return f"{uuid.uuid4().hex}_{timestamp}{ext}"
