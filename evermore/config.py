"""Configuration settings for Evermore."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_AUDIO_MIME_TYPES = (
    "audio/mpeg,audio/mp3,audio/mp4,audio/x-m4a,audio/wav,audio/x-wav,"
    "audio/webm,audio/ogg,audio/flac,audio/x-flac"
)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./evermore.db")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", "480"))

    # Upload / content store
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    MAX_UPLOAD_SIZE_MB: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", "50"))
    ALLOWED_AUDIO_MIME_TYPES: frozenset[str] = frozenset(
        t.strip().lower() for t in os.getenv("ALLOWED_AUDIO_MIME_TYPES", DEFAULT_AUDIO_MIME_TYPES).split(",") if t.strip()
    )
    AUDIO_ANALYSIS_ENABLED: bool = _env_bool("AUDIO_ANALYSIS_ENABLED", "true")

    # Voice model
    VOICE_MODEL_READY_THRESHOLD: int = int(os.getenv("VOICE_MODEL_READY_THRESHOLD", "5"))
    VOICE_MODEL_PROGRESS_STEP: int = int(os.getenv("VOICE_MODEL_PROGRESS_STEP", "10"))
    REQUIRE_READY_VOICE_MODEL: bool = _env_bool("REQUIRE_READY_VOICE_MODEL", "true")

    # Text generation
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o")
    LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "150"))
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.8"))
    LLM_TIMEOUT_SECONDS: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))

    # Speech synthesis
    TTS_PROVIDER: str = os.getenv("TTS_PROVIDER", "placeholder").lower()
    ELEVENLABS_API_KEY: str = os.getenv("ELEVENLABS_API_KEY", "")
    ELEVENLABS_VOICE_ID: str = os.getenv("ELEVENLABS_VOICE_ID", "")
    ELEVENLABS_MODEL_ID: str = os.getenv("ELEVENLABS_MODEL_ID", "eleven_monolingual_v1")
    ELEVENLABS_BASE_URL: str = os.getenv("ELEVENLABS_BASE_URL", "https://api.elevenlabs.io/v1")
    TTS_TIMEOUT_SECONDS: float = float(os.getenv("TTS_TIMEOUT_SECONDS", "30"))

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = _env_bool("DEBUG", "false")

    def __init__(self) -> None:
        self._generated_jwt_secret = not self.JWT_SECRET_KEY
        if self._generated_jwt_secret:
            self.JWT_SECRET_KEY = secrets.token_urlsafe(32)

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if self._generated_jwt_secret:
            errors.append("JWT_SECRET_KEY is not set - using auto-generated key (not persistent across restarts)")
        if not self.OPENAI_API_KEY:
            errors.append("OPENAI_API_KEY is not set - chat replies will fail")
        if self.TTS_PROVIDER == "elevenlabs" and not (self.ELEVENLABS_API_KEY and self.ELEVENLABS_VOICE_ID):
            errors.append("TTS_PROVIDER is 'elevenlabs' but ELEVENLABS_API_KEY or ELEVENLABS_VOICE_ID is missing")
        if self.TTS_PROVIDER not in ("placeholder", "elevenlabs"):
            errors.append(f"Unknown TTS_PROVIDER '{self.TTS_PROVIDER}' - falling back to placeholder speech")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
