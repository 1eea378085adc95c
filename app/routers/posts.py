"""Post API endpoints."""

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Request,
    Response,
    UploadFile,
)
from sqlalchemy.orm import Session

from app.database import SessionFactory, SessionLocal, get_db
from app.models.post import VoiceFilter
from app.rate_limit import limiter
from app.routers.audio import read_upload
from app.schemas.post import CreatePostRequest, PostListResponse, PostResponse
from app.services.engagement import get_engagement_ledger
from app.services.feed import get_feed_service
from app.services.ingestion import PostMetadata, TranscriptionScheduler, get_ingestion_orchestrator
from app.services.transcription_worker import TranscriptionWorker

router = APIRouter(prefix="/posts", tags=["Posts"])

# Session source for background transcription; tests point it at their engine.
_session_factory: SessionFactory | None = None


def _transcription_scheduler(background_tasks: BackgroundTasks) -> TranscriptionScheduler:
    worker = TranscriptionWorker(session_factory=_session_factory or SessionLocal)

    def schedule(post_id: int) -> None:
        background_tasks.add_task(worker.run, post_id)

    return schedule


@router.get("/feed", response_model=PostListResponse)
def get_feed(limit: int = 50, db: Session = Depends(get_db)) -> PostListResponse:
    """Newest posts first."""
    posts = get_feed_service().list_feed(db, limit=limit)
    return PostListResponse(items=[PostResponse.model_validate(p) for p in posts], total=len(posts))


@router.get("/mais-curtidos", response_model=PostListResponse)
def get_most_liked(limit: int = 50, db: Session = Depends(get_db)) -> PostListResponse:
    """Posts ordered by like count."""
    posts = get_feed_service().list_most_liked(db, limit=limit)
    return PostListResponse(items=[PostResponse.model_validate(p) for p in posts], total=len(posts))


@router.get("/usuario/{user_id}", response_model=PostListResponse)
def get_user_posts(user_id: int, limit: int = 50, db: Session = Depends(get_db)) -> PostListResponse:
    """Posts of one user, newest first."""
    posts = get_feed_service().list_user_posts(db, user_id, limit=limit)
    return PostListResponse(items=[PostResponse.model_validate(p) for p in posts], total=len(posts))


@router.post("/com-arquivo", response_model=PostResponse, status_code=201)
@limiter.limit("20/minute")
async def create_post_with_file(
    request: Request,
    arquivo: UploadFile = File(...),
    user_id: int = Form(..., alias="usuarioId"),
    content: str | None = Form(None, alias="conteudo"),
    voice_filter: VoiceFilter = Form(VoiceFilter.NATURAL, alias="tipoFiltroVoz"),
    db: Session = Depends(get_db),
) -> PostResponse:
    """Create a post from a multipart audio upload."""
    data = await read_upload(arquivo)
    post = get_ingestion_orchestrator().create_post_from_upload(
        db,
        user_id,
        data,
        arquivo.filename,
        arquivo.content_type,
        PostMetadata(content=content, voice_filter=voice_filter),
    )
    return PostResponse.model_validate(post)


@router.post("/com-audio-base64", response_model=PostResponse, status_code=201)
@limiter.limit("20/minute")
def create_post_with_base64(
    request: Request,
    body: CreatePostRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> PostResponse:
    """Create a post from a data URI and transcribe it in the background."""
    post = get_ingestion_orchestrator().create_post_from_embedded_audio(
        db,
        body.user_id,
        body.audio_data_uri,
        PostMetadata(content=body.content, voice_filter=body.voice_filter, filename=body.filename),
        schedule=_transcription_scheduler(background_tasks),
    )
    return PostResponse.model_validate(post)


@router.get("/{post_id}", response_model=PostResponse)
def get_post(post_id: int, db: Session = Depends(get_db)) -> PostResponse:
    """Get a single post by ID."""
    post = get_feed_service().get_post(db, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return PostResponse.model_validate(post)


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    content: str = Query(..., alias="conteudo"),
    db: Session = Depends(get_db),
) -> PostResponse:
    """Replace the text content of a post."""
    post = get_feed_service().update_content(db, post_id, content)
    return PostResponse.model_validate(post)


@router.post("/{post_id}/curtir", response_model=PostResponse)
def toggle_like(
    post_id: int,
    user_id: int = Query(..., alias="usuarioId"),
    db: Session = Depends(get_db),
) -> PostResponse:
    """Like the post, or remove the like if the user already liked it."""
    post = get_engagement_ledger().toggle_like(db, post_id, user_id)
    return PostResponse.model_validate(post)


@router.post("/{post_id}/transcrever", response_model=PostResponse, status_code=202)
def transcribe_post(
    post_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> PostResponse:
    """Schedule transcription for a post that has none yet or whose last attempt failed."""
    post = get_ingestion_orchestrator().request_transcription(
        db, post_id, schedule=_transcription_scheduler(background_tasks)
    )
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", status_code=204)
def delete_post(post_id: int, db: Session = Depends(get_db)) -> Response:
    """Delete a post with its likes and audio."""
    get_ingestion_orchestrator().remove_post(db, post_id)
    return Response(status_code=204)
