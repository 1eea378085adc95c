"""Feed post model."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.audio_record import AudioRecord


class VoiceFilter(str, enum.Enum):
    NATURAL = "NATURAL"
    ROBOTIC = "ROBOTICO"


class Post(Base):
    """Feed entry owning exactly one audio record.

    ``like_count`` is a cache of the number of LikeFact rows for the post and is
    only ever written by recomputing it from that table.
    """

    __tablename__ = "posts_audio"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False, index=True)
    audio_record_id = Column(Integer, ForeignKey("arquivos_audio.id"), nullable=False, unique=True)
    content = Column(Text, nullable=True)
    like_count = Column(Integer, nullable=False, default=0)
    comment_count = Column(Integer, nullable=False, default=0)
    share_count = Column(Integer, nullable=False, default=0)
    processed = Column(Boolean, nullable=False, default=False)
    voice_filter = Column(
        Enum(VoiceFilter, name="tipo_filtro_voz", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=VoiceFilter.NATURAL,
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # One-way, read-only navigation for serialization; ownership is the FK above.
    audio_record = relationship(AudioRecord, lazy="joined", viewonly=True)
