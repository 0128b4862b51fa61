"""Create audio_file and voice_model tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "audio_file",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("original_filename", sa.String(length=512), nullable=False),
        sa.Column("stored_filename", sa.String(length=512), nullable=False),
        sa.Column("file_size_bytes", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(length=128), nullable=True),
        sa.Column("duration_seconds", sa.Float(), nullable=True),
        sa.Column("quality", sa.String(length=32), nullable=False, server_default="unknown"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("stored_filename"),
    )
    op.create_index(op.f("ix_audio_file_user_id"), "audio_file", ["user_id"])

    op.create_table(
        "voice_model",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="training"),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_audio_files", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_duration", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_voice_model_progress"),
    )
    op.create_index(op.f("ix_voice_model_user_id"), "voice_model", ["user_id"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_voice_model_user_id"), table_name="voice_model")
    op.drop_table("voice_model")
    op.drop_index(op.f("ix_audio_file_user_id"), table_name="audio_file")
    op.drop_table("audio_file")
