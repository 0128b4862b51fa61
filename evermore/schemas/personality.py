"""Pydantic schemas for the personality profile."""

from datetime import datetime

from pydantic import BaseModel, Field


class PersonalityRequest(BaseModel):
    """Profile form. Only the traits, memories and preferences groups are accepted."""

    loved_one_name: str | None = Field(default=None, max_length=256)
    loved_one_relation: str | None = Field(default=None, max_length=128)
    traits: dict[str, str] = {}
    memories: dict[str, str] = {}
    preferences: dict[str, str] = {}

    model_config = {"extra": "forbid"}


class PersonalityResponse(BaseModel):
    id: int
    loved_one_name: str | None
    loved_one_relation: str | None
    traits: dict[str, str]
    memories: dict[str, str]
    preferences: dict[str, str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
