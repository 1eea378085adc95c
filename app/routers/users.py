"""User API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.user import CreateUserRequest, UserResponse
from app.services.user import get_user_service

router = APIRouter(prefix="/usuarios", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=201)
def create_user(body: CreateUserRequest, db: Session = Depends(get_db)) -> UserResponse:
    """Create a user."""
    user = get_user_service().create_user(db, body.username, body.name, body.email, body.avatar_url)
    return UserResponse.model_validate(user)


@router.get("", response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db)) -> list[UserResponse]:
    """List active users."""
    return [UserResponse.model_validate(u) for u in get_user_service().list_active_users(db)]


@router.get("/nome-usuario/{username}", response_model=UserResponse)
def get_user_by_username(username: str, db: Session = Depends(get_db)) -> UserResponse:
    """Get a user by username."""
    user = get_user_service().get_by_username(db, username)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)) -> UserResponse:
    """Get a user by ID."""
    user = get_user_service().get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, body: CreateUserRequest, db: Session = Depends(get_db)) -> UserResponse:
    """Replace a user's profile."""
    user = get_user_service().update_user(db, user_id, body.username, body.name, body.email, body.avatar_url)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=204)
def deactivate_user(user_id: int, db: Session = Depends(get_db)) -> Response:
    """Deactivate a user. Their posts and audio are kept."""
    get_user_service().deactivate_user(db, user_id)
    return Response(status_code=204)
