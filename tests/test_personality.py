"""Tests for the personality profile and persona prompt composition."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from evermore.models.personality import Personality
from evermore.services.personality import (
    PERSONA_PREAMBLE,
    RESPONSE_CONSTRAINT,
    build_system_prompt,
    render_group,
)

PROFILE = {
    "loved_one_name": "Rosa",
    "loved_one_relation": "grandmother",
    "traits": {"humor": "dry and quick", "warmth": "endless"},
    "memories": {"summer": "making plum jam in August"},
    "preferences": {},
}


class TestPromptComposition:
    def test_default_persona_without_profile(self):
        prompt = build_system_prompt(None)
        assert prompt == f"{PERSONA_PREAMBLE} {RESPONSE_CONSTRAINT}"

    def test_full_profile(self):
        prompt = build_system_prompt(Personality(**PROFILE))
        assert prompt.startswith(PERSONA_PREAMBLE)
        assert prompt.endswith(RESPONSE_CONSTRAINT)
        assert "Your name is Rosa." in prompt
        assert "You are the user's grandmother." in prompt
        assert "Your personality traits include: humor: dry and quick, warmth: endless." in prompt
        assert "Important memories and experiences include: summer: making plum jam in August." in prompt

    def test_empty_groups_contribute_nothing(self):
        prompt = build_system_prompt(Personality(**PROFILE))
        assert "speaking style" not in prompt

    def test_profile_without_name(self):
        prompt = build_system_prompt(Personality(loved_one_relation="father", traits={}, memories={}, preferences={}))
        assert "Your name is" not in prompt
        assert "You are the user's father." in prompt

    def test_render_group(self):
        assert render_group({"a": "1", "b": "2"}) == "a: 1, b: 2"
        assert render_group({}) == ""
        assert render_group(None) == ""


class TestPersonalityAPI:
    def test_get_before_save(self, client: TestClient, test_user: dict):
        response = client.get("/api/v1/personality", headers=test_user["headers"])
        assert response.status_code == 200
        assert response.json() is None

    def test_create_and_read(self, client: TestClient, test_user: dict):
        response = client.post("/api/v1/personality", json=PROFILE, headers=test_user["headers"])
        assert response.status_code == 200
        assert response.json()["loved_one_name"] == "Rosa"

        data = client.get("/api/v1/personality", headers=test_user["headers"]).json()
        assert data["traits"] == PROFILE["traits"]
        assert data["memories"] == PROFILE["memories"]
        assert data["preferences"] == {}

    def test_upsert_replaces_single_row(self, client: TestClient, test_user: dict, db_session: Session):
        first = client.post("/api/v1/personality", json=PROFILE, headers=test_user["headers"]).json()
        updated = {**PROFILE, "loved_one_name": "Nonna Rosa", "preferences": {"greeting": "tesoro"}}
        second = client.post("/api/v1/personality", json=updated, headers=test_user["headers"]).json()

        assert second["id"] == first["id"]
        assert second["loved_one_name"] == "Nonna Rosa"
        assert second["preferences"] == {"greeting": "tesoro"}
        assert db_session.query(Personality).filter(Personality.user_id == test_user["user_id"]).count() == 1

    def test_unknown_group_rejected(self, client: TestClient, test_user: dict):
        response = client.post(
            "/api/v1/personality",
            json={**PROFILE, "secrets": {"x": "y"}},
            headers=test_user["headers"],
        )
        assert response.status_code == 400

    def test_non_string_values_rejected(self, client: TestClient, test_user: dict):
        response = client.post(
            "/api/v1/personality",
            json={**PROFILE, "traits": {"age": {"nested": True}}},
            headers=test_user["headers"],
        )
        assert response.status_code == 400

    def test_profiles_are_per_user(self, client: TestClient, test_user: dict, other_user: dict):
        client.post("/api/v1/personality", json=PROFILE, headers=test_user["headers"])
        response = client.get("/api/v1/personality", headers=other_user["headers"])
        assert response.json() is None
