"""Voice model training tracker."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String

from evermore.database import Base

STATUS_TRAINING = "training"
STATUS_READY = "ready"
STATUS_FAILED = "failed"


class VoiceModel(Base):
    """Per-user training progress. Status only changes through the tracker service."""

    __tablename__ = "voice_model"
    __table_args__ = (CheckConstraint("progress >= 0 AND progress <= 100", name="ck_voice_model_progress"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, unique=True, index=True)
    status = Column(String(32), nullable=False, default=STATUS_TRAINING)  # training, ready, failed
    progress = Column(Integer, nullable=False, default=0)
    total_audio_files = Column(Integer, nullable=False, default=0)
    total_duration = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
