"""Exception hierarchy for Voz Social.

    VozSocialError
    +-- ValidationError       bad input (size, MIME, missing fields, malformed data URI)
    +-- NotFoundError         user, post or audio record missing
    +-- ExternalServiceError  transcription provider failure, carries a kind
    +-- StorageError          filesystem failure while storing or reading audio

The HTTP mapping lives in ``main.py``.
"""

from enum import Enum


class VozSocialError(Exception):
    """Base exception for all Voz Social errors."""

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        self.message = message
        super().__init__(message)


class ValidationError(VozSocialError):
    """Invalid client input. ``fields`` maps field names to messages."""

    def __init__(self, message: str, fields: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or {}


class NotFoundError(VozSocialError):
    """A referenced entity does not exist."""


class StorageError(VozSocialError):
    """Audio bytes could not be written or read."""


class ExternalServiceKind(str, Enum):
    UNREACHABLE = "UNREACHABLE"
    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"
    TIMEOUT = "TIMEOUT"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    PARSE_FAILURE = "PARSE_FAILURE"


_RETRYABLE_KINDS = {
    ExternalServiceKind.UNREACHABLE,
    ExternalServiceKind.RATE_LIMITED,
    ExternalServiceKind.TIMEOUT,
}


class ExternalServiceError(VozSocialError):
    """The transcription or voice provider failed.

    ``status_code`` is the provider's HTTP status when one was received.
    """

    def __init__(self, kind: ExternalServiceKind, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        if self.kind in _RETRYABLE_KINDS:
            return True
        return self.kind == ExternalServiceKind.UPSTREAM_ERROR and (self.status_code or 0) >= 500

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"
