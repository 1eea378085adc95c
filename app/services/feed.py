"""Read side of posts and audio records, plus post content edits."""

from sqlalchemy.orm import Session

from app.errors import NotFoundError
from app.models.audio_record import AudioRecord
from app.models.post import Post


class FeedService:
    """Handles post and audio retrieval for the feed."""

    def get_post(self, db: Session, post_id: int) -> Post | None:
        return db.get(Post, post_id)

    def list_feed(self, db: Session, limit: int = 50) -> list[Post]:
        """Newest posts first."""
        return db.query(Post).order_by(Post.created_at.desc(), Post.id.desc()).limit(limit).all()

    def list_user_posts(self, db: Session, user_id: int, limit: int = 50) -> list[Post]:
        return (
            db.query(Post)
            .filter(Post.user_id == user_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit)
            .all()
        )

    def list_most_liked(self, db: Session, limit: int = 50) -> list[Post]:
        """Posts ordered by like count, newest first among ties."""
        return db.query(Post).order_by(Post.like_count.desc(), Post.created_at.desc()).limit(limit).all()

    def update_content(self, db: Session, post_id: int, content: str | None) -> Post:
        post = db.get(Post, post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")
        post.content = content
        db.commit()
        db.refresh(post)
        return post

    def get_audio(self, db: Session, audio_id: int) -> AudioRecord | None:
        return db.get(AudioRecord, audio_id)

    def list_user_audio(self, db: Session, user_id: int) -> list[AudioRecord]:
        """Audio records of a user, newest first."""
        return (
            db.query(AudioRecord)
            .filter(AudioRecord.user_id == user_id)
            .order_by(AudioRecord.created_at.desc(), AudioRecord.id.desc())
            .all()
        )


_feed_service: FeedService | None = None


def get_feed_service() -> FeedService:
    """Get singleton feed service instance."""
    global _feed_service
    if _feed_service is None:
        _feed_service = FeedService()
    return _feed_service
