"""Conversation store and the response orchestrator."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from evermore.config import get_settings
from evermore.errors import NotFoundError, VoiceModelNotReadyError
from evermore.models.chat import ROLE_ASSISTANT, ROLE_USER, Chat, Message
from evermore.services.generation import get_response_generator
from evermore.services.personality import build_system_prompt, get_personality_service
from evermore.services.speech import get_speech_synthesizer
from evermore.services.voice_model import get_voice_model_service

logger = logging.getLogger("evermore")

DEFAULT_CHAT_TITLE = "New Conversation"


class ConversationService:
    """Handles chats, their messages, and persona replies."""

    def create_chat(self, db: Session, user_id: int, title: str | None = None) -> Chat:
        now = datetime.utcnow()
        chat = Chat(user_id=user_id, title=title or DEFAULT_CHAT_TITLE, created_at=now, updated_at=now)
        db.add(chat)
        db.commit()
        db.refresh(chat)
        return chat

    def get_user_chats(self, db: Session, user_id: int) -> list[Chat]:
        """Get all chats for a user, most recently active first."""
        return (
            db.query(Chat)
            .filter(Chat.user_id == user_id)
            .order_by(Chat.updated_at.desc(), Chat.id.desc())
            .all()
        )

    def get_chat(self, db: Session, chat_id: int, user_id: int) -> Chat:
        """Get a chat scoped to its owner. Raises NotFoundError otherwise."""
        chat = db.query(Chat).filter(Chat.id == chat_id, Chat.user_id == user_id).first()
        if not chat:
            raise NotFoundError("Chat not found")
        return chat

    def rename_chat(self, db: Session, chat_id: int, user_id: int, title: str) -> Chat:
        chat = self.get_chat(db, chat_id, user_id)
        chat.title = title
        db.commit()
        db.refresh(chat)
        return chat

    def get_chat_messages(self, db: Session, chat_id: int, user_id: int) -> list[Message]:
        """Get a chat's messages, oldest first."""
        self.get_chat(db, chat_id, user_id)
        return (
            db.query(Message)
            .filter(Message.chat_id == chat_id)
            .order_by(Message.created_at, Message.id)
            .all()
        )

    def send_message(self, db: Session, chat_id: int, user_id: int, content: str) -> tuple[Message, Message]:
        """Persist one user utterance and the persona's spoken reply.

        Ownership and voice model readiness are checked before anything is
        written. The user message is committed before the upstream calls, so a
        generation failure leaves it in place; nothing is retried here.
        """
        chat = self.get_chat(db, chat_id, user_id)
        if get_settings().REQUIRE_READY_VOICE_MODEL and not get_voice_model_service().is_ready(db, user_id):
            raise VoiceModelNotReadyError()

        user_message = Message(chat_id=chat.id, role=ROLE_USER, content=content, created_at=datetime.utcnow())
        db.add(user_message)
        db.commit()
        db.refresh(user_message)

        personality = get_personality_service().get_personality(db, user_id)
        system_prompt = build_system_prompt(personality)

        reply = get_response_generator().generate(system_prompt, content)
        speech = get_speech_synthesizer().synthesize(reply)

        now = datetime.utcnow()
        ai_message = Message(
            chat_id=chat.id,
            role=ROLE_ASSISTANT,
            content=reply,
            audio_url=speech.audio_url,
            audio_duration=speech.duration_seconds,
            created_at=now,
        )
        db.add(ai_message)
        chat.updated_at = now
        db.commit()
        db.refresh(ai_message)

        logger.info("Chat %s: stored reply %s (%d chars)", chat.id, ai_message.id, len(reply))
        return user_message, ai_message


_conversation_service: ConversationService | None = None


def get_conversation_service() -> ConversationService:
    """Get singleton conversation service instance."""
    global _conversation_service
    if _conversation_service is None:
        _conversation_service = ConversationService()
    return _conversation_service
