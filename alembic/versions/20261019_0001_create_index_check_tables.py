"""create index check tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("plan", sa.String(length=32), server_default="free", nullable=False, comment="free, premium"),
        sa.Column("role", sa.String(length=32), server_default="user", nullable=False, comment="user, admin"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "scans",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, comment="INDEXED, NOT_INDEXED"),
        sa.Column("checked_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_scans_url_checked_at", "scans", ["url", "checked_at"], unique=False)
    op.create_index("ix_scans_checked_at", "scans", ["checked_at"], unique=False)

    op.create_table(
        "batches",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("total_urls", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "indexed_count",
            sa.Integer(),
            server_default="0",
            nullable=False,
            comment="Incremented in-database as INDEXED results arrive",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_batches_user_id_created_at", "batches", ["user_id", "created_at"], unique=False)

    op.create_table(
        "batch_results",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("batch_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("engine", sa.String(length=32), nullable=True),
        sa.Column("checked_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["batch_id"], ["batches.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_batch_results_batch_id", "batch_results", ["batch_id"], unique=False)

    op.create_table(
        "ip_usage",
        sa.Column("ip", sa.String(length=64), nullable=False),
        sa.Column("count", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "usage_date",
            sa.Date(),
            nullable=False,
            comment="UTC day the count applies to; older rows count as zero",
        ),
        sa.PrimaryKeyConstraint("ip"),
    )

    op.create_table(
        "app_settings",
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("value", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("key"),
    )
    op.bulk_insert(
        sa.table("app_settings", sa.column("key", sa.String), sa.column("value", sa.String)),
        [
            {"key": "guest_mode", "value": "true"},
            {"key": "public_signup", "value": "true"},
        ],
    )


def downgrade() -> None:
    op.drop_table("app_settings")
    op.drop_table("ip_usage")
    op.drop_index("ix_batch_results_batch_id", table_name="batch_results")
    op.drop_table("batch_results")
    op.drop_index("ix_batches_user_id_created_at", table_name="batches")
    op.drop_table("batches")
    op.drop_index("ix_scans_checked_at", table_name="scans")
    op.drop_index("ix_scans_url_checked_at", table_name="scans")
    op.drop_table("scans")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_table("users")
