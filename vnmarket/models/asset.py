"""Canonical cached instrument record, one row per symbol."""

import enum
import uuid

from sqlalchemy import DateTime, Enum, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from vnmarket.models.base import Base


class AssetType(str, enum.Enum):
    STOCK = "Stock"
    INDEX = "Index"
    FUND = "Fund"


class VnAsset(Base):
    """A tradable or trackable instrument known to the local cache.

    ``symbol`` is the natural key used by upserts. ``id`` and ``created_at``
    are assigned on first insert and never rewritten afterwards.
    """

    __tablename__ = "vn_assets"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    symbol: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, comment="Ticker-like identifier, case-sensitive as stored")

    name: Mapped[str] = mapped_column(String(500), nullable=False)

    asset_type: Mapped[AssetType] = mapped_column(
        Enum(
            AssetType,
            name="vn_asset_type",
            native_enum=False,
            create_constraint=True,
            length=20,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )

    exchange: Mapped[str] = mapped_column(String(20), nullable=False, comment="Normalized venue code (HOSE, HNX, UPCOM, FUND)")

    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="VND")

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    updated_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        Index("ix_vn_assets_name", "name"),
        Index("ix_vn_assets_asset_type", "asset_type"),
    )
