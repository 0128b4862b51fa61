"""Pydantic schemas for memory capsules."""

from datetime import datetime

from pydantic import BaseModel, Field


class MemoryCapsuleCreateRequest(BaseModel):
    chat_id: int
    title: str | None = Field(default=None, max_length=256)
    description: str | None = None
    icon: str | None = Field(default=None, max_length=64)


class MemoryCapsuleResponse(BaseModel):
    id: int
    chat_id: int
    title: str
    description: str | None
    icon: str | None
    message_count: int
    total_duration: float
    created_at: datetime

    model_config = {"from_attributes": True}
