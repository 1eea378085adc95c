"""User service for the minimal account operations the feed needs."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.errors import NotFoundError, ValidationError
from app.models.user import User

logger = logging.getLogger("voz_social")


class UserService:
    """Creates, updates, deactivates and looks up users."""

    def _check_unique(self, db: Session, username: str, email: str | None, user_id: int | None = None) -> None:
        """Raise ValidationError if another user already holds the username or email."""
        taken = db.query(User).filter(func.lower(User.username) == username.lower())
        if user_id is not None:
            taken = taken.filter(User.id != user_id)
        if taken.first():
            raise ValidationError("Username already taken", {"nomeUsuario": "Username already taken"})

        if email:
            taken = db.query(User).filter(func.lower(User.email) == email)
            if user_id is not None:
                taken = taken.filter(User.id != user_id)
            if taken.first():
                raise ValidationError("Email already registered", {"email": "Email already registered"})

    def create_user(
        self,
        db: Session,
        username: str,
        name: str,
        email: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        """Create an active user. Raises ValidationError if username or email is taken."""
        username = username.strip()
        email = email.lower().strip() if email else None
        self._check_unique(db, username, email)

        user = User(username=username, name=name.strip(), email=email, avatar_url=avatar_url, active=True)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created user %s (id=%s)", user.username, user.id)
        return user

    def update_user(
        self,
        db: Session,
        user_id: int,
        username: str,
        name: str,
        email: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        """Replace a user's profile fields, keeping username and email unique."""
        user = self.require_user(db, user_id)
        username = username.strip()
        email = email.lower().strip() if email else None
        self._check_unique(db, username, email, user_id=user_id)

        user.username = username
        user.name = name.strip()
        user.email = email
        user.avatar_url = avatar_url
        db.commit()
        db.refresh(user)
        logger.info("Updated user %s", user_id)
        return user

    def deactivate_user(self, db: Session, user_id: int) -> None:
        """Soft delete: the user stops appearing in the active list."""
        user = self.require_user(db, user_id)
        user.active = False
        db.commit()
        logger.info("Deactivated user %s", user_id)

    def get_user(self, db: Session, user_id: int) -> User | None:
        return db.get(User, user_id)

    def get_by_username(self, db: Session, username: str) -> User | None:
        return db.query(User).filter(User.username == username).first()

    def require_user(self, db: Session, user_id: int) -> User:
        """Return the user or raise NotFoundError."""
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def list_active_users(self, db: Session) -> list[User]:
        return db.query(User).filter(User.active.is_(True)).order_by(User.name).all()


_user_service: UserService | None = None


def get_user_service() -> UserService:
    """Get singleton user service instance."""
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
