"""API routers."""

from evermore.routers.audio import router as audio_router
from evermore.routers.auth import router as auth_router
from evermore.routers.chats import router as chats_router
from evermore.routers.memory_capsules import router as memory_capsules_router
from evermore.routers.personality import router as personality_router
from evermore.routers.voice_model import router as voice_model_router

__all__ = [
    "auth_router",
    "audio_router",
    "voice_model_router",
    "personality_router",
    "chats_router",
    "memory_capsules_router",
]
