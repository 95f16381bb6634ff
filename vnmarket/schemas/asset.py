"""Canonical asset shapes shared by the normalizer, store and sync service."""

from datetime import datetime

from pydantic import BaseModel, Field

from vnmarket.core.config import settings
from vnmarket.models.asset import AssetType


class NewAssetCandidate(BaseModel):
    """Normalized asset waiting to be upserted. Never persisted on its own."""

    symbol: str = Field(min_length=1)
    name: str
    asset_type: AssetType
    exchange: str = Field(min_length=1)
    currency: str = Field(default_factory=lambda: settings.DEFAULT_CURRENCY)


class SyncResult(BaseModel):
    total_synced: int
    timestamp: datetime
