"""Like toggling with a like count derived from the like facts."""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from app.errors import NotFoundError
from app.models.like import LikeFact
from app.models.post import Post
from app.services.user import get_user_service

logger = logging.getLogger("voz_social")


class EngagementLedger:
    """Owns the LikeFact table and the cached ``Post.like_count``.

    A toggle first takes a row lock on the post (``SELECT ... FOR UPDATE``),
    so toggles on the same post run one at a time. The cached count is then
    rewritten from ``count(LikeFact)`` in the same transaction, never
    incremented in Python. Under READ COMMITTED the count statement runs
    after the lock is granted and sees every like committed before it.
    SQLite ignores the lock clause; its single writer gives the same order.
    """

    def _post_lock(self, db: Session, post_id: int) -> Query:
        return db.query(Post).filter(Post.id == post_id).with_for_update()

    def _find_like(self, db: Session, post_id: int, user_id: int) -> LikeFact | None:
        return db.query(LikeFact).filter(LikeFact.post_id == post_id, LikeFact.user_id == user_id).first()

    def has_liked(self, db: Session, post_id: int, user_id: int) -> bool:
        return self._find_like(db, post_id, user_id) is not None

    def count_likes(self, db: Session, post_id: int) -> int:
        return db.query(func.count(LikeFact.id)).filter(LikeFact.post_id == post_id).scalar() or 0

    def toggle_like(self, db: Session, post_id: int, user_id: int) -> Post:
        """Flip the (post, user) like state and return the refreshed post."""
        get_user_service().require_user(db, user_id)
        if self._post_lock(db, post_id).first() is None:
            raise NotFoundError(f"Post {post_id} not found")

        existing = self._find_like(db, post_id, user_id)
        if existing is not None:
            db.delete(existing)
            db.flush()
            logger.debug("User %s unliked post %s", user_id, post_id)
        else:
            db.add(LikeFact(post_id=post_id, user_id=user_id))
            try:
                db.flush()
                logger.debug("User %s liked post %s", user_id, post_id)
            except IntegrityError:
                # The same like was recorded first elsewhere; the pair is LIKED either way.
                db.rollback()
                logger.info("Concurrent like for post %s by user %s already recorded", post_id, user_id)
                self._post_lock(db, post_id).one()

        self._sync_like_count(db, post_id)
        db.commit()

        post = db.get(Post, post_id)
        db.refresh(post)
        return post

    def delete_for_post(self, db: Session, post_id: int) -> int:
        """Delete every like of a post without committing. Returns the number removed."""
        return db.query(LikeFact).filter(LikeFact.post_id == post_id).delete(synchronize_session=False)

    def _sync_like_count(self, db: Session, post_id: int) -> None:
        like_total = select(func.count(LikeFact.id)).where(LikeFact.post_id == post_id).scalar_subquery()
        db.execute(
            update(Post).where(Post.id == post_id).values(like_count=like_total).execution_options(
                synchronize_session=False
            )
        )


_engagement_ledger: EngagementLedger | None = None


def get_engagement_ledger() -> EngagementLedger:
    """Get singleton engagement ledger instance."""
    global _engagement_ledger
    if _engagement_ledger is None:
        _engagement_ledger = EngagementLedger()
    return _engagement_ledger
