"""Tests for the memory capsule archiver."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from evermore.errors import NotFoundError, ValidationError
from evermore.models.chat import Chat, Message
from evermore.models.memory_capsule import MemoryCapsule
from evermore.services.memory_capsule import MemoryCapsuleService


def seed_chat(db_session: Session, user_id: int, turns: list[tuple[str, str, float | None]], title: str | None = "Our talk") -> Chat:
    chat = Chat(user_id=user_id, title=title)
    db_session.add(chat)
    db_session.flush()
    for role, content, duration in turns:
        db_session.add(Message(chat_id=chat.id, role=role, content=content, audio_duration=duration))
        db_session.flush()
    db_session.commit()
    return chat


TURNS = [
    ("user", "Tell me about the garden again", None),
    ("assistant", "The tomatoes were taller than you that year.", 4.5),
    ("user", "And the fig tree?", None),
    ("assistant", "Your grandfather planted it the day you were born.", 6.25),
    ("assistant", "It still gives fruit every August.", None),
]


class TestArchiver:
    def test_summary_statistics(self, db_session: Session, test_user: dict):
        chat = seed_chat(db_session, test_user["user_id"], TURNS)
        capsule = MemoryCapsuleService().archive_chat(db_session, test_user["user_id"], chat.id)

        assert capsule.message_count == 5
        assert capsule.total_duration == pytest.approx(10.75)
        assert capsule.title == "Our talk"
        assert capsule.description == "Tell me about the garden again..."
        assert capsule.icon is None

    def test_description_truncated_to_100_chars(self, db_session: Session, test_user: dict):
        long_text = "x" * 250
        chat = seed_chat(db_session, test_user["user_id"], [("user", long_text, None)])
        capsule = MemoryCapsuleService().archive_chat(db_session, test_user["user_id"], chat.id)
        assert capsule.description == "x" * 100 + "..."

    def test_untitled_chat_placeholder(self, db_session: Session, test_user: dict):
        chat = seed_chat(db_session, test_user["user_id"], TURNS[:1], title=None)
        capsule = MemoryCapsuleService().archive_chat(db_session, test_user["user_id"], chat.id)
        assert capsule.title == "Untitled Conversation"

    def test_explicit_fields_win(self, db_session: Session, test_user: dict):
        chat = seed_chat(db_session, test_user["user_id"], TURNS)
        capsule = MemoryCapsuleService().archive_chat(
            db_session, test_user["user_id"], chat.id, title="Garden", description="", icon="heart"
        )
        assert capsule.title == "Garden"
        assert capsule.description == ""
        assert capsule.icon == "heart"

    def test_empty_chat_rejected(self, db_session: Session, test_user: dict):
        chat = seed_chat(db_session, test_user["user_id"], [])
        with pytest.raises(ValidationError):
            MemoryCapsuleService().archive_chat(db_session, test_user["user_id"], chat.id)
        assert db_session.query(MemoryCapsule).count() == 0

    def test_other_users_chat(self, db_session: Session, test_user: dict, other_user: dict):
        chat = seed_chat(db_session, other_user["user_id"], TURNS)
        with pytest.raises(NotFoundError):
            MemoryCapsuleService().archive_chat(db_session, test_user["user_id"], chat.id)

    def test_archiving_twice_creates_two_capsules(self, db_session: Session, test_user: dict):
        chat = seed_chat(db_session, test_user["user_id"], TURNS)
        service = MemoryCapsuleService()
        first = service.archive_chat(db_session, test_user["user_id"], chat.id)
        second = service.archive_chat(db_session, test_user["user_id"], chat.id)
        assert first.id != second.id
        assert db_session.query(MemoryCapsule).filter(MemoryCapsule.chat_id == chat.id).count() == 2

    def test_capsule_is_frozen(self, db_session: Session, test_user: dict):
        chat = seed_chat(db_session, test_user["user_id"], TURNS)
        capsule = MemoryCapsuleService().archive_chat(db_session, test_user["user_id"], chat.id)

        db_session.add(Message(chat_id=chat.id, role="assistant", content="One more thing", audio_duration=3.0))
        db_session.commit()
        db_session.refresh(capsule)
        assert capsule.message_count == 5
        assert capsule.total_duration == pytest.approx(10.75)


class TestMemoryCapsuleAPI:
    def test_create_list_and_get(self, client: TestClient, test_user: dict, db_session: Session):
        chat = seed_chat(db_session, test_user["user_id"], TURNS)
        response = client.post("/api/v1/memory-capsules", json={"chat_id": chat.id}, headers=test_user["headers"])
        assert response.status_code == 200
        created = response.json()
        assert created["message_count"] == 5
        assert created["chat_id"] == chat.id

        second = client.post(
            "/api/v1/memory-capsules", json={"chat_id": chat.id, "title": "Later"}, headers=test_user["headers"]
        ).json()
        listed = client.get("/api/v1/memory-capsules", headers=test_user["headers"]).json()
        assert [c["id"] for c in listed] == [second["id"], created["id"]]

        fetched = client.get(f"/api/v1/memory-capsules/{created['id']}", headers=test_user["headers"])
        assert fetched.json()["title"] == "Our talk"

    def test_empty_chat_is_400(self, client: TestClient, test_user: dict):
        chat = client.post("/api/v1/chats", json={}, headers=test_user["headers"]).json()
        response = client.post("/api/v1/memory-capsules", json={"chat_id": chat["id"]}, headers=test_user["headers"])
        assert response.status_code == 400
        assert response.json() == {"message": "No messages to save"}

    def test_unknown_chat_is_404(self, client: TestClient, test_user: dict):
        response = client.post("/api/v1/memory-capsules", json={"chat_id": 999}, headers=test_user["headers"])
        assert response.status_code == 404

    def test_other_users_capsule_is_404(self, client: TestClient, test_user: dict, other_user: dict, db_session: Session):
        chat = seed_chat(db_session, other_user["user_id"], TURNS)
        capsule = client.post(
            "/api/v1/memory-capsules", json={"chat_id": chat.id}, headers=other_user["headers"]
        ).json()
        response = client.get(f"/api/v1/memory-capsules/{capsule['id']}", headers=test_user["headers"])
        assert response.status_code == 404
        assert client.get("/api/v1/memory-capsules", headers=test_user["headers"]).json() == []
