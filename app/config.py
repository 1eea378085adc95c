"""Configuration settings for Voz Social."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./voz_social.db")

    # Audio storage
    AUDIO_STORAGE_DIR: str = os.getenv("AUDIO_STORAGE_DIR", "uploads/audio")
    MAX_UPLOAD_SIZE_MB: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", "50"))
    MAX_AUDIO_DURATION_SECONDS: int = int(os.getenv("MAX_AUDIO_DURATION_SECONDS", "15"))

    # Google AI (transcription provider)
    GOOGLE_AI_API_KEY: str = os.getenv("GOOGLE_AI_API_KEY", "")
    GOOGLE_AI_BASE_URL: str = os.getenv("GOOGLE_AI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    GOOGLE_AI_MODEL: str = os.getenv("GOOGLE_AI_MODEL", "gemini-2.0-flash")

    # Transcription
    TRANSCRIPTION_LANGUAGE: str = os.getenv("TRANSCRIPTION_LANGUAGE", "pt-BR")
    TRANSCRIPTION_TIMEOUT_SECONDS: float = float(os.getenv("TRANSCRIPTION_TIMEOUT_SECONDS", "30"))
    TRANSCRIPTION_TEMPERATURE: float = float(os.getenv("TRANSCRIPTION_TEMPERATURE", "0.1"))
    TRANSCRIPTION_MAX_OUTPUT_TOKENS: int = int(os.getenv("TRANSCRIPTION_MAX_OUTPUT_TOKENS", "1000"))
    TRANSCRIPTION_MAX_ATTEMPTS: int = int(os.getenv("TRANSCRIPTION_MAX_ATTEMPTS", "3"))
    TRANSCRIPTION_RETRY_BACKOFF_SECONDS: float = float(os.getenv("TRANSCRIPTION_RETRY_BACKOFF_SECONDS", "2"))

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if self.GOOGLE_AI_API_KEY == "":
            errors.append("GOOGLE_AI_API_KEY is not set - transcription requests will be rejected")
        if self.TRANSCRIPTION_MAX_ATTEMPTS < 1:
            errors.append("TRANSCRIPTION_MAX_ATTEMPTS must be at least 1")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
