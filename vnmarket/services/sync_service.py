"""VN assets sync - refreshes the local asset cache from VCI and FMarket."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from sqlalchemy.orm import Session

from vnmarket.core.errors import StorageError, SyncMetadataError
from vnmarket.core.logging import get_logger
from vnmarket.ingestion.fmarket_source import FMarketSource
from vnmarket.ingestion.vci_source import VciSource
from vnmarket.schemas.asset import NewAssetCandidate, SyncResult
from vnmarket.services.asset_store import AssetStore
from vnmarket.services.normalizer import AssetNormalizer

log = get_logger("sync_service")


class AssetSyncService:
    """Runs one-shot, stateless sync cycles over all provider sources.

    Each source goes through fetch -> normalize -> upsert on its own. A
    failure anywhere in that chain is logged and counts as zero synced
    assets for the source; it never stops the other sources. The sync
    metadata row is written after every run, even when all sources failed.

    Usage:
        with SessionLocal() as db:
            result = await AssetSyncService(db).sync_all_assets()
    """

    def __init__(
        self,
        db: Session,
        listing_source: Optional[VciSource] = None,
        fund_source: Optional[FMarketSource] = None,
        normalizer: Optional[AssetNormalizer] = None,
    ):
        self.db = db
        self.store = AssetStore(db)
        self.listing_source = listing_source or VciSource()
        self.fund_source = fund_source or FMarketSource()
        self.normalizer = normalizer or AssetNormalizer()

    async def sync_all_assets(self) -> SyncResult:
        """Fetch every source and merge the results into the cache.

        Raises:
            SyncMetadataError: the status row could not be written. Assets
                upserted earlier in the run stay committed; the count is on
                ``persisted_count``.
        """
        log.info("Starting VN assets sync from VCI and FMarket...")

        pipelines: List[Tuple[str, Callable[[], Awaitable[List[Any]]], Callable[[List[Any]], List[NewAssetCandidate]]]] = [
            ("stocks and indices", self.listing_source.list_symbols, self.normalizer.normalize_listings),
            ("funds", self.fund_source.list_funds, self.normalizer.normalize_funds),
        ]

        # Network fetches overlap; upserts share one session and stay sequential
        fetched = await asyncio.gather(
            *(fetch() for _, fetch, _ in pipelines),
            return_exceptions=True,
        )

        total_synced = 0
        for (label, _, normalize), raw in zip(pipelines, fetched):
            total_synced += self._sync_source(label, raw, normalize)

        timestamp = datetime.now(timezone.utc)
        try:
            self.store.record_sync(total_synced, timestamp)
        except StorageError as exc:
            log.error(f"Failed to update sync metadata after syncing {total_synced} assets: {exc}")
            raise SyncMetadataError(str(exc), persisted_count=total_synced) from exc

        log.info(f"VN assets sync completed. Total synced: {total_synced}")
        return SyncResult(total_synced=total_synced, timestamp=timestamp)

    def _sync_source(
        self,
        label: str,
        raw: Any,
        normalize: Callable[[List[Any]], List[NewAssetCandidate]],
    ) -> int:
        """Normalize and store one source's records; 0 if any step failed."""
        if isinstance(raw, BaseException):
            if not isinstance(raw, Exception):
                # Cancellation and interpreter exits are not source failures
                raise raw
            log.warning(f"Failed to sync {label}: {raw}")
            return 0

        try:
            candidates = normalize(raw)
            count = self.store.upsert_bulk(candidates)
        except Exception as exc:  # noqa: BLE001
            log.warning(f"Failed to sync {label}: {exc}")
            return 0

        log.info(f"Synced {count} {label}")
        return count

    async def full_resync(self) -> SyncResult:
        """Drop every cached asset, then run a normal sync from empty."""
        deleted = self.store.clear_all()
        log.info(f"Full resync: cleared {deleted} assets, refetching all sources")
        return await self.sync_all_assets()

    def get_asset_count(self) -> int:
        return self.store.count()
