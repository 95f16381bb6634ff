from datetime import datetime

from pydantic import BaseModel

from vnmarket.models.asset import AssetType


class AssetOut(BaseModel):
    id: str
    symbol: str
    name: str
    asset_type: AssetType
    exchange: str
    currency: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class AssetListResponse(BaseModel):
    request_id: str
    api_latency_ms: int
    total_count: int
    data: list[AssetOut]


class CountResponse(BaseModel):
    count: int


class ClearResponse(BaseModel):
    deleted: int


class SyncStatusOut(BaseModel):
    last_synced_at: datetime
    sync_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class SyncStatusResponse(BaseModel):
    asset_count: int
    status: SyncStatusOut | None


class SyncTriggerResponse(BaseModel):
    success: bool
    total_synced: int
    timestamp: datetime | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    database: str
    last_synced_at: datetime | None
