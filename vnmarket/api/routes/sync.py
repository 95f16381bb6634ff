"""Sync routes - Trigger asset sync runs and inspect sync status."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vnmarket.api.deps import get_db
from vnmarket.core.errors import SyncMetadataError
from vnmarket.core.logging import get_logger
from vnmarket.schemas.api import SyncStatusOut, SyncStatusResponse, SyncTriggerResponse
from vnmarket.services.asset_store import AssetStore
from vnmarket.services.sync_service import AssetSyncService

router = APIRouter(prefix="/sync", tags=["sync"])
log = get_logger("sync_routes")


@router.post("/run", response_model=SyncTriggerResponse)
async def trigger_sync(db: Session = Depends(get_db)):
    """
    Run one sync cycle across VCI and FMarket.

    A failing provider only lowers ``total_synced``; the call fails only when
    the sync status row cannot be written.
    """
    log.info("Asset sync triggered via API")
    try:
        result = await AssetSyncService(db).sync_all_assets()
    except SyncMetadataError as exc:
        return SyncTriggerResponse(
            success=False,
            total_synced=exc.persisted_count,
            error=str(exc),
        )
    return SyncTriggerResponse(success=True, total_synced=result.total_synced, timestamp=result.timestamp)


@router.post("/full", response_model=SyncTriggerResponse)
async def trigger_full_resync(db: Session = Depends(get_db)):
    """Clear the asset cache, then sync every source from scratch."""
    log.info("Full asset resync triggered via API")
    try:
        result = await AssetSyncService(db).full_resync()
    except SyncMetadataError as exc:
        return SyncTriggerResponse(
            success=False,
            total_synced=exc.persisted_count,
            error=str(exc),
        )
    return SyncTriggerResponse(success=True, total_synced=result.total_synced, timestamp=result.timestamp)


@router.get("/status", response_model=SyncStatusResponse)
def get_sync_status(db: Session = Depends(get_db)):
    """Last sync time, assets processed by that run, and current cache size."""
    store = AssetStore(db)
    status = store.get_sync_status()
    return SyncStatusResponse(
        asset_count=store.count(),
        status=SyncStatusOut.model_validate(status) if status else None,
    )
