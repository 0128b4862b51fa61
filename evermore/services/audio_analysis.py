"""Audio probing using faster-whisper's decoder."""

import logging
from dataclasses import dataclass
from pathlib import Path

from evermore.config import get_settings

logger = logging.getLogger("evermore")

SAMPLING_RATE = 16000

QUALITY_UNKNOWN = "unknown"
QUALITY_POOR = "poor"
QUALITY_GOOD = "good"
QUALITY_EXCELLENT = "excellent"


@dataclass
class AudioProbe:
    """Duration and coarse quality label for one recording."""

    duration_seconds: float | None
    quality: str


def quality_for_duration(duration_seconds: float | None) -> str:
    """Map a clip length to a coarse quality label."""
    if duration_seconds is None:
        return QUALITY_UNKNOWN
    if duration_seconds < 5:
        return QUALITY_POOR
    if duration_seconds < 30:
        return QUALITY_GOOD
    return QUALITY_EXCELLENT


class AudioAnalysisService:
    """Decodes stored recordings to measure their duration."""

    def __init__(self) -> None:
        self._decoder = None

    def _get_decoder(self):
        """Lazy-load the decoder (pulls in PyAV)."""
        if self._decoder is None:
            from faster_whisper.audio import decode_audio

            self._decoder = decode_audio
        return self._decoder

    def measure_duration(self, file_path: Path) -> float | None:
        """Return the clip length in seconds, or None if it cannot be decoded."""
        if not get_settings().AUDIO_ANALYSIS_ENABLED:
            return None
        try:
            samples = self._get_decoder()(str(file_path), sampling_rate=SAMPLING_RATE)
        except Exception as e:
            logger.warning("Could not decode %s for analysis: %s", file_path.name, e)
            return None
        return round(len(samples) / SAMPLING_RATE, 2)

    def probe(self, file_path: Path) -> AudioProbe:
        duration = self.measure_duration(file_path)
        return AudioProbe(duration_seconds=duration, quality=quality_for_duration(duration))


_audio_analysis_service: AudioAnalysisService | None = None


def get_audio_analysis_service() -> AudioAnalysisService:
    """Get singleton audio analysis service instance."""
    global _audio_analysis_service
    if _audio_analysis_service is None:
        _audio_analysis_service = AudioAnalysisService()
    return _audio_analysis_service
