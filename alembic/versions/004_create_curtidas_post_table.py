"""Create curtidas_post table

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
        "curtidas_post",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("posts_audio.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("usuarios.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "user_id", name="uk_usuario_post_curtida"),
    )
    op.create_index(op.f("ix_curtidas_post_post_id"), "curtidas_post", ["post_id"])
    op.create_index(op.f("ix_curtidas_post_user_id"), "curtidas_post", ["user_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_curtidas_post_user_id"), table_name="curtidas_post")
    op.drop_index(op.f("ix_curtidas_post_post_id"), table_name="curtidas_post")
    op.drop_table("curtidas_post")
