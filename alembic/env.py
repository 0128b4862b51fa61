"""Alembic environment configuration."""

import sys
from logging.config import fileConfig
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import create_engine, pool

from alembic import context

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

load_dotenv()

from evermore.config import get_settings
from evermore.database import Base

# Import all models so they register with Base.metadata
from evermore.models.audio_file import AudioFile  # noqa: F401
from evermore.models.chat import Chat, Message  # noqa: F401
from evermore.models.memory_capsule import MemoryCapsule  # noqa: F401
from evermore.models.personality import Personality  # noqa: F401
from evermore.models.user import User  # noqa: F401
from evermore.models.voice_model import VoiceModel  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

settings = get_settings()


def _connect_args() -> dict:
    return {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}


def run_migrations_offline() -> None:
    """Emit SQL for the configured database without connecting."""
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=settings.DATABASE_URL.startswith("sqlite"),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against a live connection."""
    connectable = create_engine(settings.DATABASE_URL, poolclass=pool.NullPool, connect_args=_connect_args())
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
