"""Pydantic schemas for chat endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class ChatCreateRequest(BaseModel):
    title: str | None = Field(default=None, max_length=256)


class ChatUpdateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=256)


class ChatResponse(BaseModel):
    id: int
    title: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MessageCreateRequest(BaseModel):
    content: str = Field(min_length=1, max_length=4000)


class MessageResponse(BaseModel):
    id: int
    chat_id: int
    role: str
    content: str
    audio_url: str | None
    audio_duration: float | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ExchangeResponse(BaseModel):
    user_message: MessageResponse
    ai_message: MessageResponse
