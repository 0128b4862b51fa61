"""Memory capsule model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text

from evermore.database import Base


class MemoryCapsule(Base):
    """Frozen summary of a chat at the moment it was saved."""

    __tablename__ = "memory_capsule"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    chat_id = Column(Integer, ForeignKey("chat.id"), nullable=False, index=True)
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(64), nullable=True)
    message_count = Column(Integer, nullable=False, default=0)
    total_duration = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
