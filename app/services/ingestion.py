"""Ingestion orchestration: audio in, audio record and post out.

Creation stores the bytes first and then writes the AudioRecord and Post in
one commit. Removal runs as an explicit sequence (likes, stored bytes, rows)
instead of relying on database cascades.

File removal is not transactional with the row deletes. A crash between the
two can leave an orphaned file or an orphaned metadata row.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.errors import NotFoundError, ValidationError
from app.models.audio_record import (
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_UPLOADED,
    AudioRecord,
)
from app.models.post import Post, VoiceFilter
from app.services.audio_codec import (
    RawAudio,
    decode_embedded,
    decode_upload,
    estimate_duration,
    generate_unique_name,
)
from app.services.audio_store import get_audio_store
from app.services.engagement import get_engagement_ledger
from app.services.user import get_user_service

logger = logging.getLogger("voz_social")

# Hands a committed post id to whatever runs transcription.
TranscriptionScheduler = Callable[[int], None]


@dataclass
class PostMetadata:
    """Caller-supplied fields for a new post."""

    content: str | None = None
    voice_filter: VoiceFilter = VoiceFilter.NATURAL
    filename: str | None = None


class IngestionOrchestrator:
    """Coordinates codec, store, records and transcription scheduling."""

    def _store_audio(self, raw: RawAudio, user_id: int) -> AudioRecord:
        stored_name = generate_unique_name(raw.original_filename)
        storage_ref = get_audio_store().save(raw.data, stored_name, user_id)
        return AudioRecord(
            user_id=user_id,
            original_filename=raw.original_filename or stored_name,
            storage_ref=storage_ref,
            size_bytes=raw.size_bytes,
            duration_seconds=estimate_duration(raw.size_bytes),
            mime_type=raw.mime_type,
            transcription_status=STATUS_UPLOADED,
            transcription_attempts=0,
        )

    def _commit_new(self, db: Session, audio: AudioRecord, metadata: PostMetadata | None) -> Post | None:
        """Persist the record (and post) in one commit, removing the stored file if that fails."""
        try:
            db.add(audio)
            db.flush()
            post = None
            if metadata is not None:
                post = Post(
                    user_id=audio.user_id,
                    audio_record_id=audio.id,
                    content=metadata.content,
                    voice_filter=metadata.voice_filter,
                    processed=False,
                    like_count=0,
                    comment_count=0,
                    share_count=0,
                )
                db.add(post)
            db.commit()
        except Exception:
            db.rollback()
            get_audio_store().delete(audio.storage_ref)
            raise

        db.refresh(audio)
        if post is not None:
            db.refresh(post)
        return post

    def store_upload(
        self, db: Session, user_id: int, data: bytes, filename: str | None, content_type: str | None
    ) -> AudioRecord:
        """Validate and store a multipart upload as a standalone audio record."""
        logger.info("Storing uploaded audio for user %s", user_id)
        get_user_service().require_user(db, user_id)
        audio = self._store_audio(decode_upload(data, content_type, filename), user_id)
        self._commit_new(db, audio, None)
        logger.info("Audio record %s stored (%d bytes)", audio.id, audio.size_bytes)
        return audio

    def store_embedded(self, db: Session, user_id: int, data_uri: str, filename: str | None = None) -> AudioRecord:
        """Decode and store a data URI as a standalone audio record."""
        logger.info("Storing embedded audio for user %s", user_id)
        get_user_service().require_user(db, user_id)
        audio = self._store_audio(decode_embedded(data_uri, filename), user_id)
        self._commit_new(db, audio, None)
        logger.info("Audio record %s stored (%d bytes)", audio.id, audio.size_bytes)
        return audio

    def create_post_from_upload(
        self,
        db: Session,
        user_id: int,
        data: bytes,
        filename: str | None,
        content_type: str | None,
        metadata: PostMetadata,
    ) -> Post:
        """Create a post from a multipart upload. No transcription is scheduled."""
        logger.info("Creating post from upload for user %s", user_id)
        get_user_service().require_user(db, user_id)
        audio = self._store_audio(decode_upload(data, content_type, filename), user_id)
        post = self._commit_new(db, audio, metadata)
        logger.info("Post %s created with audio record %s", post.id, audio.id)
        return post

    def create_post_from_embedded_audio(
        self,
        db: Session,
        user_id: int,
        data_uri: str,
        metadata: PostMetadata,
        schedule: TranscriptionScheduler,
    ) -> Post:
        """Create a post from a data URI and schedule its transcription.

        The post is committed before scheduling. A later transcription
        failure leaves it in place with ``processed=False``.
        """
        logger.info("Creating post from embedded audio for user %s", user_id)
        get_user_service().require_user(db, user_id)
        audio = self._store_audio(decode_embedded(data_uri, metadata.filename), user_id)
        audio.transcription_status = STATUS_PENDING
        post = self._commit_new(db, audio, metadata)
        logger.info("Post %s created with audio record %s", post.id, audio.id)

        schedule(post.id)
        logger.debug("Transcription scheduled for post %s", post.id)
        return post

    def request_transcription(self, db: Session, post_id: int, schedule: TranscriptionScheduler) -> Post:
        """Schedule transcription for a post that never had one or whose last run failed."""
        post = db.get(Post, post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")

        audio = db.get(AudioRecord, post.audio_record_id)
        if audio.transcription_status not in (STATUS_UPLOADED, STATUS_FAILED):
            raise ValidationError(
                f"Cannot transcribe post with status '{audio.transcription_status}'",
                {"statusTranscricao": audio.transcription_status},
            )

        audio.transcription_status = STATUS_PENDING
        audio.transcription_error = None
        db.commit()
        schedule(post.id)
        db.refresh(post)
        return post

    def remove_post(self, db: Session, post_id: int) -> None:
        """Delete a post with its likes, stored audio and audio record.

        Storage cleanup runs before the rows go away but never blocks them.
        """
        logger.info("Removing post %s", post_id)
        post = db.get(Post, post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")

        audio = db.get(AudioRecord, post.audio_record_id)
        removed_likes = get_engagement_ledger().delete_for_post(db, post_id)
        if audio is not None:
            get_audio_store().delete(audio.storage_ref)

        db.delete(post)
        db.flush()
        if audio is not None:
            db.delete(audio)
        db.commit()
        logger.info("Post %s removed (%d likes)", post_id, removed_likes)

    def remove_audio(self, db: Session, audio_id: int) -> None:
        """Delete an audio record. An attached post is removed with it."""
        audio = db.get(AudioRecord, audio_id)
        if audio is None:
            raise NotFoundError(f"Audio record {audio_id} not found")

        post = db.query(Post).filter(Post.audio_record_id == audio_id).first()
        if post is not None:
            self.remove_post(db, post.id)
            return

        logger.info("Removing audio record %s", audio_id)
        get_audio_store().delete(audio.storage_ref)
        db.delete(audio)
        db.commit()


_ingestion_orchestrator: IngestionOrchestrator | None = None


def get_ingestion_orchestrator() -> IngestionOrchestrator:
    """Get singleton ingestion orchestrator instance."""
    global _ingestion_orchestrator
    if _ingestion_orchestrator is None:
        _ingestion_orchestrator = IngestionOrchestrator()
    return _ingestion_orchestrator
