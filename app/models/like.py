"""Like fact model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint

from app.database import Base


class LikeFact(Base):
    """One user liking one post. Source of truth for like counts."""

    __tablename__ = "curtidas_post"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uk_usuario_post_curtida"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("posts_audio.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
