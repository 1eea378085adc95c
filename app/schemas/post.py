"""Pydantic schemas for post endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.post import VoiceFilter
from app.schemas.audio import AudioRecordResponse


class CreatePostRequest(BaseModel):
    user_id: int = Field(alias="usuarioId")
    audio_data_uri: str = Field(alias="audioDataUri")
    content: str | None = Field(default=None, alias="conteudo")
    voice_filter: VoiceFilter = Field(default=VoiceFilter.NATURAL, alias="tipoFiltroVoz")
    filename: str | None = Field(default=None, alias="nomeArquivo")

    model_config = {"populate_by_name": True}


class PostResponse(BaseModel):
    id: int
    user_id: int = Field(alias="usuarioId")
    audio_record: AudioRecordResponse = Field(alias="arquivoAudio")
    content: str | None = Field(alias="conteudo")
    like_count: int = Field(alias="quantidadeCurtidas")
    comment_count: int = Field(alias="quantidadeComentarios")
    share_count: int = Field(alias="quantidadeCompartilhamentos")
    processed: bool = Field(alias="processado")
    voice_filter: VoiceFilter = Field(alias="tipoFiltroVoz")
    created_at: datetime = Field(alias="criadoEm")
    updated_at: datetime = Field(alias="atualizadoEm")

    model_config = {"from_attributes": True, "populate_by_name": True}


class PostListResponse(BaseModel):
    items: list[PostResponse]
    total: int
