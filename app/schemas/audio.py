"""Pydantic schemas for audio endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.post import VoiceFilter


class AudioRecordResponse(BaseModel):
    id: int
    user_id: int = Field(alias="usuarioId")
    original_filename: str | None = Field(alias="nomeArquivoOriginal")
    size_bytes: int = Field(alias="tamanhoArquivo")
    duration_seconds: float = Field(alias="duracaoSegundos")
    mime_type: str = Field(alias="tipoMime")
    transcription: str | None = Field(alias="transcricao")
    transcription_status: str = Field(alias="statusTranscricao")
    created_at: datetime = Field(alias="criadoEm")

    model_config = {"from_attributes": True, "populate_by_name": True}


class TranscriptionRequest(BaseModel):
    audio_data_uri: str = Field(alias="audioDataUri")

    model_config = {"populate_by_name": True}


class TranscriptionResponse(BaseModel):
    transcricao: str | None = None
    sucesso: bool
    mensagem: str


class VoiceTransformRequest(BaseModel):
    audio_data_uri: str = Field(alias="audioDataUri")
    voice_filter: VoiceFilter = Field(alias="tipoFiltro")
    transcription: str | None = Field(default=None, alias="transcricao")

    model_config = {"populate_by_name": True}


class VoiceTransformResponse(BaseModel):
    audioTransformadoDataUri: str
    transcricao: str | None = None
    sucesso: bool
    mensagem: str
    transformacaoDisponivel: bool
