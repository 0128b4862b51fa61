"""Create personality and memory_capsule tables

Revision ID: 004
Revises: 003
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "004"
down_revision: str | None = "003"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "personality",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("loved_one_name", sa.String(length=256), nullable=True),
        sa.Column("loved_one_relation", sa.String(length=128), nullable=True),
        sa.Column("traits", sa.JSON(), nullable=False),
        sa.Column("memories", sa.JSON(), nullable=False),
        sa.Column("preferences", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_personality_user_id"), "personality", ["user_id"], unique=True)

    op.create_table(
        "memory_capsule",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("chat_id", sa.Integer(), sa.ForeignKey("chat.id"), nullable=False),
        sa.Column("title", sa.String(length=256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(length=64), nullable=True),
        sa.Column("message_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_duration", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_memory_capsule_user_id"), "memory_capsule", ["user_id"])
    op.create_index(op.f("ix_memory_capsule_chat_id"), "memory_capsule", ["chat_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_memory_capsule_chat_id"), table_name="memory_capsule")
    op.drop_index(op.f("ix_memory_capsule_user_id"), table_name="memory_capsule")
    op.drop_table("memory_capsule")
    op.drop_index(op.f("ix_personality_user_id"), table_name="personality")
    op.drop_table("personality")
