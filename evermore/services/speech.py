"""
Speech synthesis for assistant replies.

Providers implement ``BaseSpeechSynthesizer``; the orchestrator only sees the
interface, so tests run against the placeholder provider without network.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import httpx

from evermore.config import get_settings
from evermore.errors import UpstreamServiceError
from evermore.services.audio_analysis import get_audio_analysis_service
from evermore.services.audio_file import content_path, generate_stored_filename

logger = logging.getLogger("evermore")

PLAY_URL_PREFIX = "/api/v1/audio/play/"


@dataclass
class SpeechResult:
    """Synthesized clip stored in the content store."""

    filename: str
    duration_seconds: float = 0.0

    @property
    def audio_url(self) -> str:
        return f"{PLAY_URL_PREFIX}{self.filename}"


class BaseSpeechSynthesizer(ABC):
    """Text in, playable audio resource out."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass

    @abstractmethod
    def synthesize(self, text: str) -> SpeechResult:
        """Create one new audio resource for ``text``. Raises UpstreamServiceError."""
        pass

    def _new_path(self, extension: str = ".mp3") -> tuple[str, Path]:
        Path(get_settings().UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
        filename = generate_stored_filename("speech", extension)
        return filename, content_path(filename)


class PlaceholderSpeechSynthesizer(BaseSpeechSynthesizer):
    """Writes an empty clip. Used when no speech provider is configured."""

    @property
    def provider_name(self) -> str:
        return "placeholder"

    def synthesize(self, text: str) -> SpeechResult:
        filename, path = self._new_path()
        try:
            path.touch()
        except OSError as e:
            logger.error("Could not write placeholder speech file: %s", e)
            raise UpstreamServiceError("Failed to generate speech") from e
        return SpeechResult(filename=filename, duration_seconds=0.0)


class ElevenLabsSpeechSynthesizer(BaseSpeechSynthesizer):
    """ElevenLabs text-to-speech over its REST API."""

    def __init__(self, client: httpx.Client | None = None) -> None:
        settings = get_settings()
        self.api_key = settings.ELEVENLABS_API_KEY
        self.voice_id = settings.ELEVENLABS_VOICE_ID
        self.model_id = settings.ELEVENLABS_MODEL_ID
        self.base_url = settings.ELEVENLABS_BASE_URL.rstrip("/")
        self.client = client or httpx.Client(timeout=settings.TTS_TIMEOUT_SECONDS)

    @property
    def provider_name(self) -> str:
        return "elevenlabs"

    def synthesize(self, text: str) -> SpeechResult:
        try:
            response = self.client.post(
                f"{self.base_url}/text-to-speech/{self.voice_id}",
                headers={"Accept": "audio/mpeg", "xi-api-key": self.api_key},
                json={
                    "text": text,
                    "model_id": self.model_id,
                    "voice_settings": {"stability": 0.5, "similarity_boost": 0.5},
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Speech synthesis failed: %s", e)
            raise UpstreamServiceError("Failed to generate speech") from e

        filename, path = self._new_path()
        path.write_bytes(response.content)

        # Duration is best effort; an undecodable clip is still playable by the client.
        duration = get_audio_analysis_service().measure_duration(path)
        return SpeechResult(filename=filename, duration_seconds=duration or 0.0)


_speech_synthesizer: BaseSpeechSynthesizer | None = None


def create_speech_synthesizer(provider: str) -> BaseSpeechSynthesizer:
    if provider == "elevenlabs":
        return ElevenLabsSpeechSynthesizer()
    return PlaceholderSpeechSynthesizer()


def get_speech_synthesizer() -> BaseSpeechSynthesizer:
    """Get singleton speech synthesizer for the configured provider."""
    global _speech_synthesizer
    if _speech_synthesizer is None:
        _speech_synthesizer = create_speech_synthesizer(get_settings().TTS_PROVIDER)
        logger.info("Speech synthesis provider: %s", _speech_synthesizer.provider_name)
    return _speech_synthesizer
