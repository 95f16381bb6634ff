"""create vn_assets and vn_assets_sync tables

Revision ID: 0001_create_vn_assets
Revises:
Create Date: 2026-09-28 10:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_create_vn_assets"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "vn_assets",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("symbol", sa.String(50), nullable=False, comment="Ticker-like identifier, case-sensitive as stored"),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column(
            "asset_type",
            sa.Enum("Stock", "Index", "Fund", name="vn_asset_type", native_enum=False, create_constraint=True, length=20),
            nullable=False,
        ),
        sa.Column("exchange", sa.String(20), nullable=False, comment="Normalized venue code (HOSE, HNX, UPCOM, FUND)"),
        sa.Column("currency", sa.String(10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("symbol"),
    )
    op.create_index("ix_vn_assets_name", "vn_assets", ["name"])
    op.create_index("ix_vn_assets_asset_type", "vn_assets", ["asset_type"])

    op.create_table(
        "vn_assets_sync",
        sa.Column("id", sa.String(50), nullable=False),
        sa.Column("last_synced_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("sync_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("vn_assets_sync")
    op.drop_index("ix_vn_assets_asset_type", "vn_assets")
    op.drop_index("ix_vn_assets_name", "vn_assets")
    op.drop_table("vn_assets")
