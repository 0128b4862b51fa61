"""Voice model API endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from evermore.database import get_db
from evermore.dependencies import CurrentUser, get_current_user
from evermore.schemas.voice_model import VoiceModelResponse
from evermore.services.voice_model import get_voice_model_service

router = APIRouter(prefix="/api/v1/voice-model", tags=["Voice Model"])


@router.get("", response_model=VoiceModelResponse | None)
def get_voice_model(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> VoiceModelResponse | None:
    """Current user's voice model, or null before the first upload."""
    model = get_voice_model_service().get_voice_model(db, user.user_id)
    return VoiceModelResponse.model_validate(model) if model else None
