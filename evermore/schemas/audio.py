"""Pydantic schemas for audio ingestion endpoints."""

from datetime import datetime

from pydantic import BaseModel

from evermore.schemas.voice_model import VoiceModelResponse


class AudioFileResponse(BaseModel):
    id: int
    original_filename: str
    stored_filename: str
    file_size_bytes: int
    mime_type: str | None
    duration_seconds: float | None
    quality: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AudioUploadResponse(BaseModel):
    audio_file: AudioFileResponse
    voice_model: VoiceModelResponse


class AudioFileListResponse(BaseModel):
    items: list[AudioFileResponse]
    total: int
