"""Background transcription of stored post audio."""

import base64
import logging
import time
from collections.abc import Callable

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import SessionFactory
from app.errors import ExternalServiceError, StorageError
from app.models.audio_record import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_TRANSCRIBING,
    AudioRecord,
)
from app.models.post import Post
from app.services.audio_store import get_audio_store
from app.services.transcription_client import get_transcription_client

logger = logging.getLogger("voz_social")


class TranscriptionWorker:
    """Transcribes one post per :meth:`run` call, outside the request that created it.

    Retryable provider errors are retried with exponential backoff. Anything
    else, or running out of attempts, leaves the audio record ``failed`` with
    the error message; the post stays ``processed=False``.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        max_attempts: int | None = None,
        backoff_seconds: float | None = None,
        language: str | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        settings = get_settings()
        self._session_factory = session_factory
        self.max_attempts = max(1, max_attempts or settings.TRANSCRIPTION_MAX_ATTEMPTS)
        if backoff_seconds is None:
            backoff_seconds = settings.TRANSCRIPTION_RETRY_BACKOFF_SECONDS
        self.backoff_seconds = backoff_seconds
        self.language = language or settings.TRANSCRIPTION_LANGUAGE
        self._sleep = sleep or time.sleep

    def run(self, post_id: int) -> str:
        """Transcribe the post's audio. Returns the final transcription status."""
        db = self._session_factory()
        try:
            post = db.get(Post, post_id)
            if post is None:
                logger.warning("Transcription skipped: post %s no longer exists", post_id)
                return STATUS_FAILED
            audio_id = post.audio_record_id
            audio = db.get(AudioRecord, audio_id)

            try:
                return self._transcribe(db, post_id, audio)
            except Exception as e:
                db.rollback()
                if not self._still_exists(db, post_id, audio_id):
                    logger.warning("Transcription of post %s dropped: post was removed while running", post_id)
                    return STATUS_FAILED
                self._mark_failed(db, audio, f"Unexpected error: {e}")
                raise
        finally:
            db.close()

    def _transcribe(self, db: Session, post_id: int, audio: AudioRecord) -> str:
        audio.transcription_status = STATUS_TRANSCRIBING
        audio.transcription_attempts = 0
        db.commit()

        try:
            audio_base64 = base64.b64encode(get_audio_store().read(audio.storage_ref)).decode("ascii")
        except StorageError as e:
            logger.error("Transcription of post %s failed: %s", post_id, e)
            return self._mark_failed(db, audio, str(e))

        client = get_transcription_client()
        for attempt in range(1, self.max_attempts + 1):
            audio.transcription_attempts = attempt
            db.commit()
            try:
                text = client.transcribe(audio_base64, mime_type=audio.mime_type, language_hint=self.language)
            except ExternalServiceError as e:
                if not e.retryable or attempt == self.max_attempts:
                    logger.error("Transcription of post %s failed after %d attempt(s): %s", post_id, attempt, e)
                    return self._mark_failed(db, audio, str(e))
                delay = self.backoff_seconds * 2 ** (attempt - 1)
                logger.warning(
                    "Transcription attempt %d for post %s failed (%s); retrying in %.1fs",
                    attempt,
                    post_id,
                    e,
                    delay,
                )
                self._sleep(delay)
                continue

            audio.transcription = text
            audio.transcription_status = STATUS_COMPLETED
            audio.transcription_error = None
            # Conditional flip keeps processed false -> true a one-time transition.
            db.execute(
                update(Post)
                .where(Post.id == post_id, Post.processed.is_(False))
                .values(processed=True)
                .execution_options(synchronize_session=False)
            )
            db.commit()
            logger.info("Transcription processed for post %s", post_id)
            return STATUS_COMPLETED

        return audio.transcription_status

    @staticmethod
    def _still_exists(db: Session, post_id: int, audio_id: int) -> bool:
        # Column queries bypass the identity map, which may hold rows deleted elsewhere.
        post = db.query(Post.id).filter(Post.id == post_id).first()
        audio = db.query(AudioRecord.id).filter(AudioRecord.id == audio_id).first()
        return post is not None and audio is not None

    def _mark_failed(self, db: Session, audio: AudioRecord, message: str) -> str:
        audio.transcription_status = STATUS_FAILED
        audio.transcription_error = message
        db.commit()
        return STATUS_FAILED
