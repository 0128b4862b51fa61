"""Pydantic schemas for the voice model tracker."""

from datetime import datetime

from pydantic import BaseModel


class VoiceModelResponse(BaseModel):
    id: int
    status: str
    progress: int
    total_audio_files: int
    total_duration: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
