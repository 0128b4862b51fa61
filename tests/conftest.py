"""Pytest configuration and fixtures."""

import io
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from evermore.config import get_settings
from evermore.database import Base, get_db
from evermore.models.audio_file import AudioFile  # noqa: F401
from evermore.models.chat import Chat, Message  # noqa: F401
from evermore.models.memory_capsule import MemoryCapsule  # noqa: F401
from evermore.models.personality import Personality  # noqa: F401
from evermore.models.user import User  # noqa: F401
from evermore.models.voice_model import VoiceModel  # noqa: F401
from evermore.services import speech as speech_module
from evermore.services.auth import AuthService
from evermore.services.jwt import get_jwt_service


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="settings", autouse=True)
def settings_fixture(tmp_path, monkeypatch):
    """Point the content store at a temp dir and use offline providers."""
    settings = get_settings()
    upload_dir = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(upload_dir))
    monkeypatch.setattr(settings, "AUDIO_ANALYSIS_ENABLED", False)
    monkeypatch.setattr(settings, "REQUIRE_READY_VOICE_MODEL", True)
    monkeypatch.setattr(settings, "VOICE_MODEL_READY_THRESHOLD", 5)
    monkeypatch.setattr(settings, "VOICE_MODEL_PROGRESS_STEP", 10)
    monkeypatch.setattr(speech_module, "_speech_synthesizer", speech_module.PlaceholderSpeechSynthesizer())
    return settings


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from evermore.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


def _register(db_session: Session, email: str, display_name: str) -> dict:
    result = AuthService().register(db_session, email, "password123", display_name)
    token = get_jwt_service().create_token(
        user_id=result.user_id,
        email=result.email,
        display_name=result.display_name,
    )
    return {
        "user_id": result.user_id,
        "email": result.email,
        "display_name": result.display_name,
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session):
    """Create a test user and return its data, token and auth headers."""
    return _register(db_session, "test@example.com", "Test User")


@pytest.fixture(name="other_user")
def other_user_fixture(db_session: Session):
    """A second account, for ownership checks."""
    return _register(db_session, "other@example.com", "Other User")


def upload_audio(
    client: TestClient,
    headers: dict,
    filename: str = "clip.mp3",
    content: bytes = b"\x00" * 1024,
    content_type: str = "audio/mpeg",
):
    """POST one recording and return the response."""
    return client.post(
        "/api/v1/audio/",
        files={"audio": (filename, io.BytesIO(content), content_type)},
        headers=headers,
    )


def completion(text: str | None) -> SimpleNamespace:
    """Shape of an OpenAI chat completion with a single choice."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture(name="mock_llm")
def mock_llm_fixture():
    """Patch the OpenAI client used by the response generator."""
    mock_client = MagicMock()
    mock_client.chat.completions.create.return_value = completion("Hello sweetheart, I'm right here with you.")
    with patch("evermore.services.generation.ResponseGenerator._get_client", return_value=mock_client):
        yield mock_client
