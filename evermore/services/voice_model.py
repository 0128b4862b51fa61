"""Voice model tracker: the only code that moves a voice model between states."""

import logging
from datetime import datetime

from sqlalchemy import and_, case, update
from sqlalchemy.orm import Session

from evermore.config import get_settings
from evermore.database import upsert
from evermore.models.voice_model import STATUS_FAILED, STATUS_READY, STATUS_TRAINING, VoiceModel

logger = logging.getLogger("evermore")


class VoiceModelService:
    """Tracks per-user training progress derived from ingested recordings.

    States: training -> ready once enough recordings are ingested. ``failed``
    is only entered through ``mark_failed`` (external training signal). No
    transition leads back to training.
    """

    def _ensure_exists(self, db: Session, user_id: int) -> None:
        now = datetime.utcnow()
        upsert(
            db,
            VoiceModel,
            {
                "user_id": user_id,
                "status": STATUS_TRAINING,
                "progress": 0,
                "total_audio_files": 0,
                "total_duration": 0.0,
                "created_at": now,
                "updated_at": now,
            },
            conflict_columns=["user_id"],
        )

    def _load(self, db: Session, user_id: int) -> VoiceModel:
        return db.query(VoiceModel).populate_existing().filter(VoiceModel.user_id == user_id).one()

    def record_upload(self, db: Session, user_id: int, duration_seconds: float | None = None) -> VoiceModel:
        """Apply one ingested recording to the user's voice model.

        The counter, progress and status change in a single UPDATE so two
        concurrent uploads can never lose an increment. The caller commits.
        """
        settings = get_settings()
        step = settings.VOICE_MODEL_PROGRESS_STEP
        threshold = settings.VOICE_MODEL_READY_THRESHOLD

        self._ensure_exists(db, user_id)

        new_count = VoiceModel.total_audio_files + 1
        new_progress = VoiceModel.progress + step
        stmt = (
            update(VoiceModel)
            .where(VoiceModel.user_id == user_id)
            .values(
                total_audio_files=new_count,
                total_duration=VoiceModel.total_duration + (duration_seconds or 0.0),
                progress=case((new_progress >= 100, 100), else_=new_progress),
                status=case(
                    (and_(VoiceModel.status == STATUS_TRAINING, new_count >= threshold), STATUS_READY),
                    else_=VoiceModel.status,
                ),
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        db.execute(stmt)
        db.flush()

        model = self._load(db, user_id)
        if model.status == STATUS_READY and model.total_audio_files == threshold:
            logger.info("Voice model for user %s is ready (%d recordings)", user_id, model.total_audio_files)
        return model

    def mark_failed(self, db: Session, user_id: int) -> VoiceModel | None:
        """Record an external training failure. Returns None if the user has no voice model."""
        result = db.execute(
            update(VoiceModel)
            .where(VoiceModel.user_id == user_id)
            .values(status=STATUS_FAILED, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        db.commit()
        if result.rowcount == 0:
            return None
        logger.warning("Voice model for user %s marked as failed", user_id)
        return self._load(db, user_id)

    def get_voice_model(self, db: Session, user_id: int) -> VoiceModel | None:
        return db.query(VoiceModel).filter(VoiceModel.user_id == user_id).first()

    def is_ready(self, db: Session, user_id: int) -> bool:
        model = self.get_voice_model(db, user_id)
        return model is not None and model.status == STATUS_READY


_voice_model_service: VoiceModelService | None = None


def get_voice_model_service() -> VoiceModelService:
    """Get singleton voice model service instance."""
    global _voice_model_service
    if _voice_model_service is None:
        _voice_model_service = VoiceModelService()
    return _voice_model_service
