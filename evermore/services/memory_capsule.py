"""Memory capsule archiver."""

from sqlalchemy.orm import Session

from evermore.errors import NotFoundError, ValidationError
from evermore.models.chat import Message
from evermore.models.memory_capsule import MemoryCapsule
from evermore.services.conversation import get_conversation_service

UNTITLED_CAPSULE = "Untitled Conversation"
DESCRIPTION_PREVIEW_CHARS = 100


def summarize_messages(messages: list[Message]) -> tuple[int, float]:
    """Return (message_count, total_duration). Messages without audio count as zero seconds."""
    total = sum(m.audio_duration or 0.0 for m in messages)
    return len(messages), float(total)


def default_description(messages: list[Message]) -> str:
    return messages[0].content[:DESCRIPTION_PREVIEW_CHARS] + "..."


class MemoryCapsuleService:
    """Snapshots a chat's summary into a standalone, never-updated record.

    Archiving the same chat twice produces two capsules.
    """

    def archive_chat(
        self,
        db: Session,
        user_id: int,
        chat_id: int,
        title: str | None = None,
        description: str | None = None,
        icon: str | None = None,
    ) -> MemoryCapsule:
        conversations = get_conversation_service()
        chat = conversations.get_chat(db, chat_id, user_id)
        messages = conversations.get_chat_messages(db, chat_id, user_id)
        if not messages:
            raise ValidationError("No messages to save")

        message_count, total_duration = summarize_messages(messages)
        capsule = MemoryCapsule(
            user_id=user_id,
            chat_id=chat.id,
            title=title or chat.title or UNTITLED_CAPSULE,
            description=description if description is not None else default_description(messages),
            icon=icon,
            message_count=message_count,
            total_duration=total_duration,
        )
        db.add(capsule)
        db.commit()
        db.refresh(capsule)
        return capsule

    def get_user_capsules(self, db: Session, user_id: int) -> list[MemoryCapsule]:
        """Get all capsules for a user, newest first."""
        return (
            db.query(MemoryCapsule)
            .filter(MemoryCapsule.user_id == user_id)
            .order_by(MemoryCapsule.created_at.desc(), MemoryCapsule.id.desc())
            .all()
        )

    def get_capsule(self, db: Session, capsule_id: int, user_id: int) -> MemoryCapsule:
        capsule = (
            db.query(MemoryCapsule)
            .filter(MemoryCapsule.id == capsule_id, MemoryCapsule.user_id == user_id)
            .first()
        )
        if not capsule:
            raise NotFoundError("Memory capsule not found")
        return capsule


_memory_capsule_service: MemoryCapsuleService | None = None


def get_memory_capsule_service() -> MemoryCapsuleService:
    """Get singleton memory capsule service instance."""
    global _memory_capsule_service
    if _memory_capsule_service is None:
        _memory_capsule_service = MemoryCapsuleService()
    return _memory_capsule_service
