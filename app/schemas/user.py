"""Pydantic schemas for user endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class CreateUserRequest(BaseModel):
    username: str = Field(alias="nomeUsuario", min_length=3, max_length=50)
    name: str = Field(alias="nome", min_length=1, max_length=100)
    email: str | None = Field(default=None, max_length=100)
    avatar_url: str | None = Field(default=None, alias="urlAvatar", max_length=255)

    model_config = {"populate_by_name": True}


class UserResponse(BaseModel):
    id: int
    username: str = Field(alias="nomeUsuario")
    name: str = Field(alias="nome")
    email: str | None
    avatar_url: str | None = Field(alias="urlAvatar")
    active: bool = Field(alias="ativo")
    created_at: datetime = Field(alias="criadoEm")

    model_config = {"from_attributes": True, "populate_by_name": True}
