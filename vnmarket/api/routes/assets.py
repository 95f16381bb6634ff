"""Asset routes - Search and resolve cached instrument metadata."""

import time
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from vnmarket.api.deps import get_db
from vnmarket.core.logging import get_logger
from vnmarket.models.asset import AssetType
from vnmarket.schemas.api import AssetListResponse, AssetOut, ClearResponse, CountResponse
from vnmarket.services.asset_store import AssetStore

router = APIRouter(prefix="/assets", tags=["assets"])
log = get_logger("asset_routes")


def _list_response(start: float, assets: list) -> AssetListResponse:
    return AssetListResponse(
        request_id=str(uuid.uuid4()),
        api_latency_ms=int((time.perf_counter() - start) * 1000),
        total_count=len(assets),
        data=[AssetOut.model_validate(a) for a in assets],
    )


@router.get("/search", response_model=AssetListResponse)
def search_assets(
    q: str = Query(..., min_length=1, description="Case-insensitive partial match on symbol or name"),
    db: Session = Depends(get_db),
):
    """
    Search cached assets by symbol or name.

    Returns at most 20 matches ordered by symbol. This is a plain substring
    filter, not a relevance-ranked search.
    """
    start = time.perf_counter()
    return _list_response(start, AssetStore(db).search(q))


@router.get("", response_model=AssetListResponse)
def list_assets_by_type(
    asset_type: AssetType = Query(..., description="Stock, Index or Fund"),
    db: Session = Depends(get_db),
):
    """List every cached asset of one type."""
    start = time.perf_counter()
    return _list_response(start, AssetStore(db).get_by_type(asset_type))


@router.get("/count", response_model=CountResponse)
def count_assets(db: Session = Depends(get_db)):
    return CountResponse(count=AssetStore(db).count())


@router.get("/by-symbol/{symbol}", response_model=AssetOut)
def get_asset(symbol: str, db: Session = Depends(get_db)):
    """Resolve one asset by its exact (case-sensitive) symbol."""
    asset = AssetStore(db).get_by_symbol(symbol)
    if asset is None:
        raise HTTPException(status_code=404, detail=f"Asset '{symbol}' not found")
    return AssetOut.model_validate(asset)


@router.delete("", response_model=ClearResponse)
def clear_assets(db: Session = Depends(get_db)):
    """Remove every cached asset. Run a sync afterwards to repopulate."""
    deleted = AssetStore(db).clear_all()
    log.warning(f"Asset cache cleared via API ({deleted} rows)")
    return ClearResponse(deleted=deleted)
