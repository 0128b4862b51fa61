"""Personality profile API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from evermore.database import get_db
from evermore.dependencies import CurrentUser, get_current_user
from evermore.schemas.personality import PersonalityRequest, PersonalityResponse
from evermore.services.personality import get_personality_service

router = APIRouter(prefix="/api/v1/personality", tags=["Personality"])


@router.post("", response_model=PersonalityResponse)
def save_personality(
    body: PersonalityRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PersonalityResponse:
    """Create or replace the persona profile."""
    personality = get_personality_service().upsert_personality(db, user.user_id, body)
    return PersonalityResponse.model_validate(personality)


@router.get("", response_model=PersonalityResponse | None)
def get_personality(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PersonalityResponse | None:
    personality = get_personality_service().get_personality(db, user.user_id)
    return PersonalityResponse.model_validate(personality) if personality else None
