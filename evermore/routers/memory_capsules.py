"""Memory capsule API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from evermore.database import get_db
from evermore.dependencies import CurrentUser, get_current_user
from evermore.schemas.memory_capsule import MemoryCapsuleCreateRequest, MemoryCapsuleResponse
from evermore.services.memory_capsule import get_memory_capsule_service

router = APIRouter(prefix="/api/v1/memory-capsules", tags=["Memory Capsules"])


@router.post("", response_model=MemoryCapsuleResponse)
def create_capsule(
    body: MemoryCapsuleCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MemoryCapsuleResponse:
    """Save a conversation as a memory capsule."""
    capsule = get_memory_capsule_service().archive_chat(
        db,
        user.user_id,
        body.chat_id,
        title=body.title,
        description=body.description,
        icon=body.icon,
    )
    return MemoryCapsuleResponse.model_validate(capsule)


@router.get("", response_model=list[MemoryCapsuleResponse])
def list_capsules(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[MemoryCapsuleResponse]:
    """List memory capsules, newest first."""
    capsules = get_memory_capsule_service().get_user_capsules(db, user.user_id)
    return [MemoryCapsuleResponse.model_validate(c) for c in capsules]


@router.get("/{capsule_id}", response_model=MemoryCapsuleResponse)
def get_capsule(
    capsule_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MemoryCapsuleResponse:
    return MemoryCapsuleResponse.model_validate(get_memory_capsule_service().get_capsule(db, capsule_id, user.user_id))
