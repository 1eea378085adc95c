"""Create posts_audio table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "003"
down_revision: str | None = "002"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

voice_filter = sa.Enum("NATURAL", "ROBOTICO", name="tipo_filtro_voz")


def upgrade() -> None:
    op.create_table(
        "posts_audio",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("usuarios.id"), nullable=False),
        sa.Column("audio_record_id", sa.Integer(), sa.ForeignKey("arquivos_audio.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comment_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("share_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("processed", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("voice_filter", voice_filter, nullable=False, server_default="NATURAL"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("audio_record_id"),
    )
    op.create_index(op.f("ix_posts_audio_user_id"), "posts_audio", ["user_id"])
    op.create_index("ix_posts_audio_created_at", "posts_audio", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_posts_audio_created_at", table_name="posts_audio")
    op.drop_index(op.f("ix_posts_audio_user_id"), table_name="posts_audio")
    op.drop_table("posts_audio")
    voice_filter.drop(op.get_bind(), checkfirst=True)
