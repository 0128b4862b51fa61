"""Audio ingestion API endpoints."""

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from evermore.database import get_db
from evermore.dependencies import CurrentUser, get_current_user
from evermore.errors import ValidationError
from evermore.rate_limit import limiter
from evermore.schemas.audio import AudioFileListResponse, AudioFileResponse, AudioUploadResponse
from evermore.schemas.voice_model import VoiceModelResponse
from evermore.services.audio_file import get_audio_file_service

router = APIRouter(prefix="/api/v1/audio", tags=["Audio"])


@router.post("", response_model=AudioUploadResponse)
@router.post("/", response_model=AudioUploadResponse, include_in_schema=False)
@limiter.limit("20/minute")
async def upload_audio(
    request: Request,
    audio: UploadFile | None = File(default=None),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AudioUploadResponse:
    """Upload a recording of the loved one's voice."""
    if audio is None or not audio.filename:
        raise ValidationError("No audio file provided")

    audio_file, voice_model = await get_audio_file_service().ingest(db, user.user_id, audio)
    return AudioUploadResponse(
        audio_file=AudioFileResponse.model_validate(audio_file),
        voice_model=VoiceModelResponse.model_validate(voice_model),
    )


@router.get("/files", response_model=AudioFileListResponse)
def list_audio_files(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AudioFileListResponse:
    """List all recordings for the current user."""
    files = get_audio_file_service().get_user_audio_files(db, user.user_id)
    return AudioFileListResponse(
        items=[AudioFileResponse.model_validate(f) for f in files],
        total=len(files),
    )


@router.delete("/{file_id}")
def delete_audio_file(
    file_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Delete a recording and its stored file."""
    get_audio_file_service().delete_audio_file(db, file_id, user.user_id)
    return {"message": "Audio file deleted successfully"}


@router.get("/play/{filename}")
def play_audio(filename: str) -> FileResponse:
    """Stream a stored recording or synthesized reply by its generated filename."""
    path = get_audio_file_service().resolve_playable(filename)
    return FileResponse(path)
