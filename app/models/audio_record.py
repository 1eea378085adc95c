"""Audio record model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text

from app.database import Base

# Transcription lifecycle. "uploaded" means no transcription was requested.
STATUS_UPLOADED = "uploaded"
STATUS_PENDING = "pending"
STATUS_TRANSCRIBING = "transcribing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


class AudioRecord(Base):
    """Stored audio clip metadata. The bytes live in the AudioStore under ``storage_ref``."""

    __tablename__ = "arquivos_audio"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False, index=True)
    original_filename = Column(String(255), nullable=True)
    storage_ref = Column(String(500), nullable=False, unique=True)
    size_bytes = Column(Integer, nullable=False)
    duration_seconds = Column(Float, nullable=False, default=0.0)
    mime_type = Column(String(100), nullable=False)
    transcription = Column(Text, nullable=True)
    transcription_status = Column(String(32), nullable=False, default=STATUS_UPLOADED)
    transcription_attempts = Column(Integer, nullable=False, default=0)
    transcription_error = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
