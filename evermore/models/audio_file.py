"""Uploaded recording model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String

from evermore.database import Base


class AudioFile(Base):
    """One uploaded recording of the loved one's voice."""

    __tablename__ = "audio_file"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    original_filename = Column(String(512), nullable=False)
    stored_filename = Column(String(512), nullable=False, unique=True)
    file_size_bytes = Column(Integer, nullable=False)
    mime_type = Column(String(128), nullable=True)
    duration_seconds = Column(Float, nullable=True)
    quality = Column(String(32), nullable=False, default="unknown")  # poor, good, excellent, unknown
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
