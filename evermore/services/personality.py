"""Personality profile storage and persona prompt composition."""

from datetime import datetime

from sqlalchemy.orm import Session

from evermore.database import upsert
from evermore.models.personality import Personality
from evermore.schemas.personality import PersonalityRequest

PERSONA_PREAMBLE = (
    "You are speaking as a beloved family member who has passed away. "
    "You are warm, caring, and full of love. You speak in a gentle, nurturing tone "
    "and often reference shared memories and experiences. "
    "Keep responses conversational and heartfelt."
)

RESPONSE_CONSTRAINT = (
    "Keep responses under 100 words and speak as if you're having a natural "
    "conversation with someone you love dearly."
)

GROUP_INTROS = (
    ("traits", "Your personality traits include"),
    ("memories", "Important memories and experiences include"),
    ("preferences", "Your speaking style preferences"),
)


def render_group(group: dict[str, str] | None) -> str:
    """Render a profile group as ``key: value`` pairs joined by commas."""
    if not group:
        return ""
    return ", ".join(f"{key}: {value}" for key, value in group.items())


def build_system_prompt(personality: Personality | None) -> str:
    """Compose the persona instruction block. A missing profile yields the generic persona."""
    parts = [PERSONA_PREAMBLE]

    if personality is not None:
        if personality.loved_one_name:
            parts.append(f"Your name is {personality.loved_one_name}.")
        if personality.loved_one_relation:
            parts.append(f"You are the user's {personality.loved_one_relation}.")
        for field, intro in GROUP_INTROS:
            rendered = render_group(getattr(personality, field))
            if rendered:
                parts.append(f"{intro}: {rendered}.")

    parts.append(RESPONSE_CONSTRAINT)
    return " ".join(parts)


class PersonalityService:
    """Stores the single persona profile per user."""

    def upsert_personality(self, db: Session, user_id: int, data: PersonalityRequest) -> Personality:
        """Create or replace the user's profile with one INSERT ... ON CONFLICT statement."""
        now = datetime.utcnow()
        values = {
            "user_id": user_id,
            "loved_one_name": data.loved_one_name,
            "loved_one_relation": data.loved_one_relation,
            "traits": dict(data.traits),
            "memories": dict(data.memories),
            "preferences": dict(data.preferences),
            "created_at": now,
            "updated_at": now,
        }
        upsert(
            db,
            Personality,
            values,
            conflict_columns=["user_id"],
            update_columns=["loved_one_name", "loved_one_relation", "traits", "memories", "preferences", "updated_at"],
        )
        db.commit()
        return db.query(Personality).populate_existing().filter(Personality.user_id == user_id).one()

    def get_personality(self, db: Session, user_id: int) -> Personality | None:
        return db.query(Personality).filter(Personality.user_id == user_id).first()


_personality_service: PersonalityService | None = None


def get_personality_service() -> PersonalityService:
    """Get singleton personality service instance."""
    global _personality_service
    if _personality_service is None:
        _personality_service = PersonalityService()
    return _personality_service
