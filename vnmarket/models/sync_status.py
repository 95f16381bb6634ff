"""Singleton bookkeeping row for asset sync runs."""

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from vnmarket.models.base import Base

# Well-known key of the only row this table ever holds
SYNC_STATUS_ID = "vn_assets_sync_status"


class VnAssetsSync(Base):
    __tablename__ = "vn_assets_sync"

    id: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        default=SYNC_STATUS_ID,
    )

    last_synced_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    # Assets processed by the most recent run, not a running total
    sync_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    updated_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
