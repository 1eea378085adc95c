"""Audio API endpoints."""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.rate_limit import limiter
from app.schemas.audio import (
    AudioRecordResponse,
    TranscriptionRequest,
    TranscriptionResponse,
    VoiceTransformRequest,
    VoiceTransformResponse,
)
from app.services.audio_codec import decode_embedded, max_audio_bytes
from app.services.feed import get_feed_service
from app.services.ingestion import get_ingestion_orchestrator
from app.services.transcription_client import get_transcription_client

logger = logging.getLogger("voz_social")

router = APIRouter(prefix="/audio", tags=["Audio"])


async def read_upload(upload: UploadFile) -> bytes:
    """Read at most one byte past the size ceiling so oversized files are rejected without buffering them whole."""
    return await upload.read(max_audio_bytes() + 1)


@router.post("/upload", response_model=AudioRecordResponse, status_code=201)
@limiter.limit("20/minute")
async def upload_audio(
    request: Request,
    arquivo: UploadFile = File(...),
    user_id: int = Form(..., alias="usuarioId"),
    db: Session = Depends(get_db),
) -> AudioRecordResponse:
    """Upload an audio file via multipart."""
    data = await read_upload(arquivo)
    audio = get_ingestion_orchestrator().store_upload(db, user_id, data, arquivo.filename, arquivo.content_type)
    return AudioRecordResponse.model_validate(audio)


@router.post("/upload-base64", response_model=AudioRecordResponse, status_code=201)
@limiter.limit("20/minute")
def upload_audio_base64(
    request: Request,
    audio_data_uri: str = Form(..., alias="audioDataUri"),
    user_id: int = Form(..., alias="usuarioId"),
    filename: str | None = Form(None, alias="nomeArquivo"),
    db: Session = Depends(get_db),
) -> AudioRecordResponse:
    """Upload audio as a base64 data URI."""
    audio = get_ingestion_orchestrator().store_embedded(db, user_id, audio_data_uri, filename)
    return AudioRecordResponse.model_validate(audio)


@router.post("/transcrever", response_model=TranscriptionResponse)
@limiter.limit("30/minute")
def transcribe_audio(request: Request, body: TranscriptionRequest) -> TranscriptionResponse:
    """Transcribe a data URI without storing it."""
    raw = decode_embedded(body.audio_data_uri)
    text = get_transcription_client().transcribe(
        raw.to_base64(), mime_type=raw.mime_type, language_hint=get_settings().TRANSCRIPTION_LANGUAGE
    )
    return TranscriptionResponse(transcricao=text, sucesso=True, mensagem="Transcription completed")


@router.post("/transformar-voz", response_model=VoiceTransformResponse)
@limiter.limit("30/minute")
def transform_voice(request: Request, body: VoiceTransformRequest) -> VoiceTransformResponse:
    """Apply a voice filter and return the audio with its transcript."""
    logger.info("Voice transform requested - filter: %s", body.voice_filter.value)
    raw = decode_embedded(body.audio_data_uri)
    client = get_transcription_client()
    result = client.transform_voice(raw.to_base64(), raw.mime_type, body.voice_filter, body.transcription)

    transcription = body.transcription
    if not transcription or not transcription.strip():
        transcription = client.transcribe(
            raw.to_base64(), mime_type=raw.mime_type, language_hint=get_settings().TRANSCRIPTION_LANGUAGE
        )

    return VoiceTransformResponse(
        audioTransformadoDataUri=result.to_data_uri(),
        transcricao=transcription,
        sucesso=True,
        mensagem=result.message or "Voice transformation completed",
        transformacaoDisponivel=result.available,
    )


@router.get("/usuario/{user_id}", response_model=list[AudioRecordResponse])
def list_user_audio(user_id: int, db: Session = Depends(get_db)) -> list[AudioRecordResponse]:
    """List a user's audio records, newest first."""
    records = get_feed_service().list_user_audio(db, user_id)
    return [AudioRecordResponse.model_validate(r) for r in records]


@router.get("/{audio_id}", response_model=AudioRecordResponse)
def get_audio(audio_id: int, db: Session = Depends(get_db)) -> AudioRecordResponse:
    """Get a single audio record by ID."""
    audio = get_feed_service().get_audio(db, audio_id)
    if not audio:
        raise HTTPException(status_code=404, detail="Audio record not found")
    return AudioRecordResponse.model_validate(audio)


@router.delete("/{audio_id}", status_code=204)
def delete_audio(audio_id: int, db: Session = Depends(get_db)) -> Response:
    """Delete an audio record, its stored file and any post it belongs to."""
    get_ingestion_orchestrator().remove_audio(db, audio_id)
    return Response(status_code=204)
