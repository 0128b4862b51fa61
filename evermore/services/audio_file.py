"""Audio ingestion: upload validation, content storage, and recording CRUD."""

import logging
import os
import secrets
import time
from pathlib import Path

from fastapi import UploadFile
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from evermore.config import get_settings
from evermore.errors import NotFoundError, ValidationError
from evermore.models.audio_file import AudioFile
from evermore.models.voice_model import VoiceModel
from evermore.services.audio_analysis import get_audio_analysis_service
from evermore.services.voice_model import get_voice_model_service

logger = logging.getLogger("evermore")

CHUNK_SIZE = 1024 * 64  # 64KB


def generate_stored_filename(prefix: str, extension: str) -> str:
    """Collision-resistant content-store name: ``<prefix>-<epoch ms>-<9 random digits><ext>``."""
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.randbelow(10**9):09d}{extension}"


def content_path(filename: str) -> Path:
    return Path(get_settings().UPLOAD_DIR) / filename


def file_too_large_error() -> ValidationError:
    return ValidationError(f"File too large. Maximum: {get_settings().MAX_UPLOAD_SIZE_MB}MB")


class AudioFileService:
    """Handles recording upload, storage, and management."""

    def validate_upload_metadata(self, content_type: str | None) -> None:
        """Reject uploads whose declared MIME type is not whitelisted."""
        allowed = get_settings().ALLOWED_AUDIO_MIME_TYPES
        if not content_type or content_type.lower() not in allowed:
            raise ValidationError(
                f"Invalid file type '{content_type or 'unknown'}'. Allowed: {', '.join(sorted(allowed))}"
            )

    async def store_file(self, upload: UploadFile) -> tuple[str, int]:
        """Stream uploaded file to the content store with size limit. Returns (stored_filename, file_size_bytes).

        Raises ValidationError and removes the partial file once the size ceiling is crossed.
        """
        settings = get_settings()
        max_bytes = settings.max_upload_bytes
        ext = Path(upload.filename or "").suffix.lower()
        stored_filename = generate_stored_filename("audio", ext)
        Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

        file_path = content_path(stored_filename)
        file_size = 0

        try:
            with open(file_path, "wb") as f:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    file_size += len(chunk)
                    if file_size > max_bytes:
                        raise file_too_large_error()
                    f.write(chunk)
        except ValidationError:
            if file_path.exists():
                os.remove(file_path)
            raise

        return stored_filename, file_size

    async def ingest(self, db: Session, user_id: int, upload: UploadFile) -> tuple[AudioFile, VoiceModel]:
        """Validate, store and record one upload, then advance the user's voice model.

        Only the streaming write runs on the event loop; decoding and the
        database transaction go to the threadpool.
        """
        self.validate_upload_metadata(upload.content_type)
        stored_filename, size = await self.store_file(upload)
        return await run_in_threadpool(
            self.record_stored_upload,
            db,
            user_id,
            stored_filename,
            size,
            upload.filename or "unknown",
            upload.content_type,
        )

    def record_stored_upload(
        self,
        db: Session,
        user_id: int,
        stored_filename: str,
        size: int,
        original_filename: str,
        mime_type: str,
    ) -> tuple[AudioFile, VoiceModel]:
        """Probe a stored file and commit its row together with the voice model update."""
        probe = get_audio_analysis_service().probe(content_path(stored_filename))

        try:
            audio_file = AudioFile(
                user_id=user_id,
                original_filename=original_filename,
                stored_filename=stored_filename,
                file_size_bytes=size,
                mime_type=mime_type,
                duration_seconds=probe.duration_seconds,
                quality=probe.quality,
            )
            db.add(audio_file)
            db.flush()
            voice_model = get_voice_model_service().record_upload(db, user_id, probe.duration_seconds)
            db.commit()
        except Exception:
            db.rollback()
            self._remove_stored_file(stored_filename)
            raise

        db.refresh(audio_file)
        db.refresh(voice_model)
        return audio_file, voice_model
    def get_user_audio_files(self, db: Session, user_id: int) -> list[AudioFile]:
        """Get all recordings for a user, newest first."""
        return (
            db.query(AudioFile)
            .filter(AudioFile.user_id == user_id)
            .order_by(AudioFile.created_at.desc(), AudioFile.id.desc())
            .all()
        )

    def get_audio_file(self, db: Session, file_id: int, user_id: int) -> AudioFile | None:
        """Get a single recording by ID, scoped to user."""
        return db.query(AudioFile).filter(AudioFile.id == file_id, AudioFile.user_id == user_id).first()

    def delete_audio_file(self, db: Session, file_id: int, user_id: int) -> None:
        """Delete a recording's row and its backing file.

        Another user's recording is reported exactly like a missing one. The
        file is removed only after the row delete commits, so a failed commit
        keeps both; a file that is already gone does not block the delete.
        """
        audio_file = self.get_audio_file(db, file_id, user_id)
        if not audio_file:
            raise NotFoundError("Audio file not found")

        stored_filename = audio_file.stored_filename
        try:
            db.delete(audio_file)
            db.commit()
        except Exception:
            db.rollback()
            raise
        self._remove_stored_file(stored_filename)

    def _remove_stored_file(self, stored_filename: str) -> None:
        file_path = content_path(stored_filename)
        try:
            os.remove(file_path)
        except FileNotFoundError:
            logger.warning("Stored audio %s was already missing on disk", stored_filename)
        except OSError as e:
            logger.error("Could not remove stored audio %s: %s", stored_filename, e)

    def resolve_playable(self, filename: str) -> Path:
        """Path to a stored resource by its generated name. Raises NotFoundError."""
        if not filename or Path(filename).name != filename or filename.startswith("."):
            raise NotFoundError("Audio file not found")
        file_path = content_path(filename)
        if not file_path.is_file():
            raise NotFoundError("Audio file not found")
        return file_path


_audio_file_service: AudioFileService | None = None


def get_audio_file_service() -> AudioFileService:
    """Get singleton audio file service instance."""
    global _audio_file_service
    if _audio_file_service is None:
        _audio_file_service = AudioFileService()
    return _audio_file_service
