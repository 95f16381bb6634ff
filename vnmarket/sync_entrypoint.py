"""Sync entrypoint - Standalone script for running asset sync jobs.

Usage:
    python -m vnmarket.sync_entrypoint           # Sync all sources into the cache
    python -m vnmarket.sync_entrypoint --full    # Clear the cache, then sync
"""

import asyncio
import sys

from vnmarket.core.db import SessionLocal
from vnmarket.core.errors import StorageError
from vnmarket.core.logging import get_logger
from vnmarket.schemas.asset import SyncResult
from vnmarket.services.sync_service import AssetSyncService

logger = get_logger("sync_entrypoint")


async def run_sync(full: bool = False) -> SyncResult:
    with SessionLocal() as db:
        service = AssetSyncService(db)
        if full:
            return await service.full_resync()
        return await service.sync_all_assets()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the sync job; returns the process exit code."""
    args = sys.argv[1:] if argv is None else argv
    unknown = [a for a in args if a != "--full"]
    if unknown:
        logger.error(f"Unknown arguments: {unknown}. Usage: python -m vnmarket.sync_entrypoint [--full]")
        return 2

    full = "--full" in args
    logger.info(f"Asset sync starting (full={full})...")
    try:
        result = asyncio.run(run_sync(full))
    except StorageError as exc:
        logger.error(f"Asset sync failed: {exc}")
        return 1

    logger.info(f"Asset sync completed: total_synced={result.total_synced} at {result.timestamp.isoformat()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
