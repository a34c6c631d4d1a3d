"""create users, videos and ppts

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-10-19 09:12:44.218734

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e30"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
    ]


def _stored_file() -> list[sa.Column]:
    return [
        sa.Column("file_url", sa.String(length=1024), nullable=False),
        sa.Column("file_name", sa.String(length=512), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("mime_type", sa.String(length=255), nullable=True),
    ]


def upgrade() -> None:
    # Enum values match Python enum string values
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.Enum("user", "admin", name="userrole"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "videos",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("duration", sa.String(length=50), nullable=False),
        sa.Column("type", sa.Enum("module", "basic", name="videotype"), nullable=False),
        sa.Column("module_id", sa.String(length=255), nullable=True),
        sa.Column("module_name", sa.String(length=500), nullable=True),
        *_stored_file(),
        *_timestamps(),
    )
    op.create_index(op.f("ix_videos_type"), "videos", ["type"], unique=False)
    op.create_index(op.f("ix_videos_module_id"), "videos", ["module_id"], unique=False)

    op.create_table(
        "ppts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("slides", sa.Integer(), nullable=False),
        sa.Column("module_id", sa.String(length=255), nullable=False),
        sa.Column("module_name", sa.String(length=500), nullable=True),
        *_stored_file(),
        *_timestamps(),
    )
    op.create_index(op.f("ix_ppts_module_id"), "ppts", ["module_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_ppts_module_id"), table_name="ppts")
    op.drop_table("ppts")
    op.drop_index(op.f("ix_videos_module_id"), table_name="videos")
    op.drop_index(op.f("ix_videos_type"), table_name="videos")
    op.drop_table("videos")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
    sa.Enum(name="videotype").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
