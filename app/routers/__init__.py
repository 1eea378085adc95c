"""API routers."""

from app.routers.audio import router as audio_router
from app.routers.posts import router as posts_router
from app.routers.users import router as users_router

__all__ = ["audio_router", "posts_router", "users_router"]
