"""Tests for the voice model tracker state machine."""

import pytest
from conftest import upload_audio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from evermore.database import Base
from evermore.models.voice_model import VoiceModel
from evermore.services.auth import AuthService
from evermore.services.voice_model import VoiceModelService


class TestVoiceModelTracker:
    """Service-level transition rules."""

    @pytest.mark.parametrize("uploads", [1, 3, 4, 5, 9, 10, 12])
    def test_counters_after_n_uploads(self, db_session: Session, test_user: dict, uploads: int):
        service = VoiceModelService()
        for _ in range(uploads):
            model = service.record_upload(db_session, test_user["user_id"])
            db_session.commit()

        assert model.total_audio_files == uploads
        assert model.progress == min(100, 10 * uploads)
        assert model.status == ("ready" if uploads >= 5 else "training")

    def test_readiness_boundary(self, db_session: Session, test_user: dict):
        service = VoiceModelService()
        for _ in range(4):
            service.record_upload(db_session, test_user["user_id"])
        db_session.commit()
        assert service.get_voice_model(db_session, test_user["user_id"]).status == "training"
        assert service.is_ready(db_session, test_user["user_id"]) is False

        service.record_upload(db_session, test_user["user_id"])
        db_session.commit()
        assert service.get_voice_model(db_session, test_user["user_id"]).status == "ready"
        assert service.is_ready(db_session, test_user["user_id"]) is True

    def test_single_row_per_user(self, db_session: Session, test_user: dict):
        service = VoiceModelService()
        for _ in range(3):
            service.record_upload(db_session, test_user["user_id"])
        db_session.commit()
        assert db_session.query(VoiceModel).filter(VoiceModel.user_id == test_user["user_id"]).count() == 1

    def test_total_duration_accumulates(self, db_session: Session, test_user: dict):
        service = VoiceModelService()
        service.record_upload(db_session, test_user["user_id"], 12.5)
        service.record_upload(db_session, test_user["user_id"], None)
        model = service.record_upload(db_session, test_user["user_id"], 7.5)
        db_session.commit()
        assert model.total_duration == 20.0

    def test_threshold_is_configurable(self, db_session: Session, test_user: dict, settings, monkeypatch):
        monkeypatch.setattr(settings, "VOICE_MODEL_READY_THRESHOLD", 2)
        monkeypatch.setattr(settings, "VOICE_MODEL_PROGRESS_STEP", 60)
        service = VoiceModelService()
        service.record_upload(db_session, test_user["user_id"])
        model = service.record_upload(db_session, test_user["user_id"])
        db_session.commit()
        assert model.status == "ready"
        assert model.progress == 100

    def test_users_are_independent(self, db_session: Session, test_user: dict, other_user: dict):
        service = VoiceModelService()
        for _ in range(5):
            service.record_upload(db_session, test_user["user_id"])
        service.record_upload(db_session, other_user["user_id"])
        db_session.commit()
        assert service.is_ready(db_session, test_user["user_id"]) is True
        assert service.get_voice_model(db_session, other_user["user_id"]).total_audio_files == 1

    def test_interleaved_sessions_keep_every_increment(self, tmp_path):
        """Two connections recording uploads for the same user never overwrite each other's count."""
        engine = create_engine(f"sqlite:///{tmp_path / 'evermore.db'}", connect_args={"check_same_thread": False})
        Base.metadata.create_all(bind=engine)
        make_session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        service = VoiceModelService()

        first, second = make_session(), make_session()
        try:
            user_id = AuthService().register(first, "writer@example.com", "password123", "Writer").user_id

            stale = service.record_upload(first, user_id)
            first.commit()
            assert stale.total_audio_files == 1

            service.record_upload(second, user_id)
            second.commit()

            model = service.record_upload(first, user_id)
            first.commit()
            assert model.total_audio_files == 3
            assert model.progress == 30
        finally:
            first.close()
            second.close()

        with make_session() as check:
            assert check.query(VoiceModel).filter(VoiceModel.user_id == user_id).one().total_audio_files == 3
        engine.dispose()

    def test_mark_failed(self, db_session: Session, test_user: dict):
        service = VoiceModelService()
        service.record_upload(db_session, test_user["user_id"])
        db_session.commit()

        model = service.mark_failed(db_session, test_user["user_id"])
        assert model.status == "failed"

    def test_failed_model_does_not_become_ready(self, db_session: Session, test_user: dict):
        service = VoiceModelService()
        service.record_upload(db_session, test_user["user_id"])
        db_session.commit()
        service.mark_failed(db_session, test_user["user_id"])

        for _ in range(6):
            model = service.record_upload(db_session, test_user["user_id"])
        db_session.commit()
        assert model.status == "failed"
        assert model.total_audio_files == 7

    def test_mark_failed_without_model(self, db_session: Session, test_user: dict):
        assert VoiceModelService().mark_failed(db_session, test_user["user_id"]) is None


class TestVoiceModelAPI:
    def test_absent_before_first_upload(self, client: TestClient, test_user: dict):
        response = client.get("/api/v1/voice-model", headers=test_user["headers"])
        assert response.status_code == 200
        assert response.json() is None

    def test_ready_after_five_uploads(self, client: TestClient, test_user: dict):
        for i in range(5):
            response = upload_audio(client, test_user["headers"], filename=f"clip{i}.mp3")
            expected = "ready" if i == 4 else "training"
            assert response.json()["voice_model"]["status"] == expected

        model = client.get("/api/v1/voice-model", headers=test_user["headers"]).json()
        assert model["status"] == "ready"
        assert model["progress"] == 50
        assert model["total_audio_files"] == 5
