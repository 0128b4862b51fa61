"""Persona profile model."""

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String

from evermore.database import Base


class Personality(Base):
    """Traits, memories and speaking preferences used to build the persona prompt."""

    __tablename__ = "personality"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, unique=True, index=True)
    loved_one_name = Column(String(256), nullable=True)
    loved_one_relation = Column(String(128), nullable=True)
    traits = Column(JSON, nullable=False, default=dict)
    memories = Column(JSON, nullable=False, default=dict)
    preferences = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
