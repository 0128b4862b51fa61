"""Chat API endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from evermore.database import get_db
from evermore.dependencies import CurrentUser, get_current_user
from evermore.rate_limit import limiter
from evermore.schemas.chat import (
    ChatCreateRequest,
    ChatResponse,
    ChatUpdateRequest,
    ExchangeResponse,
    MessageCreateRequest,
    MessageResponse,
)
from evermore.services.conversation import get_conversation_service

router = APIRouter(prefix="/api/v1/chats", tags=["Chats"])


@router.post("", response_model=ChatResponse)
def create_chat(
    body: ChatCreateRequest | None = None,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ChatResponse:
    """Start a new conversation."""
    title = body.title if body else None
    chat = get_conversation_service().create_chat(db, user.user_id, title)
    return ChatResponse.model_validate(chat)


@router.get("", response_model=list[ChatResponse])
def list_chats(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ChatResponse]:
    """List conversations, most recently active first."""
    chats = get_conversation_service().get_user_chats(db, user.user_id)
    return [ChatResponse.model_validate(c) for c in chats]


@router.get("/{chat_id}", response_model=ChatResponse)
def get_chat(
    chat_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ChatResponse:
    return ChatResponse.model_validate(get_conversation_service().get_chat(db, chat_id, user.user_id))


@router.patch("/{chat_id}", response_model=ChatResponse)
def rename_chat(
    chat_id: int,
    body: ChatUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ChatResponse:
    chat = get_conversation_service().rename_chat(db, chat_id, user.user_id, body.title)
    return ChatResponse.model_validate(chat)


@router.get("/{chat_id}/messages", response_model=list[MessageResponse])
def list_messages(
    chat_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[MessageResponse]:
    """Messages of a conversation, oldest first."""
    messages = get_conversation_service().get_chat_messages(db, chat_id, user.user_id)
    return [MessageResponse.model_validate(m) for m in messages]


@router.post("/{chat_id}/messages", response_model=ExchangeResponse)
@limiter.limit("30/minute")
def send_message(
    request: Request,
    chat_id: int,
    body: MessageCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ExchangeResponse:
    """Send a message and receive the persona's spoken reply."""
    user_message, ai_message = get_conversation_service().send_message(db, chat_id, user.user_id, body.content)
    return ExchangeResponse(
        user_message=MessageResponse.model_validate(user_message),
        ai_message=MessageResponse.model_validate(ai_message),
    )
