"""Asset Store - persistent, idempotent repository for cached VN assets.

All reads and writes of ``vn_assets`` and the ``vn_assets_sync`` singleton go
through this class. Writes are dialect-aware ``INSERT ... ON CONFLICT``
statements so repeated syncs converge on the same rows.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from sqlalchemy import delete, func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vnmarket.core.config import settings
from vnmarket.core.errors import StorageError
from vnmarket.core.logging import get_logger
from vnmarket.models.asset import AssetType, VnAsset
from vnmarket.models.sync_status import SYNC_STATUS_ID, VnAssetsSync
from vnmarket.schemas.asset import NewAssetCandidate

log = get_logger("asset_store")

SEARCH_LIMIT = 20


class AssetStore:
    """Repository over a single SQLAlchemy session."""

    def __init__(self, db: Session, batch_size: Optional[int] = None):
        self.db = db
        self.batch_size = batch_size or settings.UPSERT_BATCH_SIZE

    @contextmanager
    def _storage_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            log.error(f"Storage failure during {action}: {exc}")
            raise StorageError(f"{action} failed: {exc}") from exc

    def _insert(self):
        """Pick the INSERT construct that supports ON CONFLICT for this bind."""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert
        if dialect == "sqlite":
            return sqlite_insert
        raise StorageError(f"Upsert is not supported on dialect {dialect!r}")

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------
    def search(self, query: str) -> List[VnAsset]:
        """Case-insensitive substring match on symbol or name, at most 20 rows."""
        stmt = (
            select(VnAsset)
            .where(
                or_(
                    VnAsset.symbol.icontains(query, autoescape=True),
                    VnAsset.name.icontains(query, autoescape=True),
                )
            )
            .order_by(VnAsset.symbol)
            .limit(SEARCH_LIMIT)
        )
        with self._storage_errors("search"):
            return list(self.db.execute(stmt).scalars().all())

    def get_by_symbol(self, symbol: str) -> Optional[VnAsset]:
        stmt = select(VnAsset).where(VnAsset.symbol == symbol)
        with self._storage_errors("get_by_symbol"):
            return self.db.execute(stmt).scalar_one_or_none()

    def get_by_type(self, asset_type: Union[AssetType, str]) -> List[VnAsset]:
        stmt = select(VnAsset).where(VnAsset.asset_type == AssetType(asset_type)).order_by(VnAsset.symbol)
        with self._storage_errors("get_by_type"):
            return list(self.db.execute(stmt).scalars().all())

    def count(self) -> int:
        stmt = select(func.count()).select_from(VnAsset)
        with self._storage_errors("count"):
            return self.db.execute(stmt).scalar() or 0

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    def upsert_bulk(self, candidates: Iterable[NewAssetCandidate]) -> int:
        """Insert new symbols and refresh existing ones.

        Existing rows keep their ``id``, ``created_at`` and ``currency``; only
        ``name``, ``asset_type``, ``exchange`` and ``updated_at`` are
        rewritten. When a symbol appears more than once the last occurrence
        wins. Returns the number of candidates received.
        """
        candidates = list(candidates)
        if not candidates:
            return 0

        # ON CONFLICT cannot touch the same row twice in one statement
        latest: Dict[str, NewAssetCandidate] = {}
        for candidate in candidates:
            latest[candidate.symbol] = candidate

        now = datetime.now(timezone.utc)
        rows: List[Dict[str, Any]] = [
            {
                "id": str(uuid.uuid4()),
                "symbol": c.symbol,
                "name": c.name,
                "asset_type": c.asset_type,
                "exchange": c.exchange,
                "currency": c.currency,
                "created_at": now,
                "updated_at": now,
            }
            for c in latest.values()
        ]

        insert = self._insert()
        with self._storage_errors("upsert_bulk"):
            for start in range(0, len(rows), self.batch_size):
                stmt = insert(VnAsset).values(rows[start:start + self.batch_size])
                stmt = stmt.on_conflict_do_update(
                    index_elements=[VnAsset.symbol],
                    set_={
                        "name": stmt.excluded.name,
                        "asset_type": stmt.excluded.asset_type,
                        "exchange": stmt.excluded.exchange,
                        "updated_at": now,
                    },
                )
                self.db.execute(stmt)
            self.db.commit()

        # Drop cached instances so later reads see the upserted values
        self.db.expire_all()
        log.debug(f"Upserted {len(candidates)} VN assets ({len(rows)} distinct symbols)")
        return len(candidates)

    def clear_all(self) -> int:
        """Delete every cached asset. Sync metadata is left untouched."""
        with self._storage_errors("clear_all"):
            result = self.db.execute(delete(VnAsset))
            self.db.commit()
        self.db.expire_all()
        deleted = result.rowcount or 0
        log.warning(f"Cleared {deleted} VN assets from cache")
        return deleted

    # -------------------------------------------------------------------------
    # Sync metadata
    # -------------------------------------------------------------------------
    def get_sync_status(self) -> Optional[VnAssetsSync]:
        with self._storage_errors("get_sync_status"):
            return self.db.get(VnAssetsSync, SYNC_STATUS_ID, populate_existing=True)

    def record_sync(self, count: int, synced_at: datetime) -> VnAssetsSync:
        """Create the singleton status row on first use, update it afterwards."""
        insert = self._insert()
        stmt = insert(VnAssetsSync).values(
            id=SYNC_STATUS_ID,
            last_synced_at=synced_at,
            sync_count=count,
            created_at=synced_at,
            updated_at=synced_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[VnAssetsSync.id],
            set_={
                "last_synced_at": stmt.excluded.last_synced_at,
                "sync_count": stmt.excluded.sync_count,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        with self._storage_errors("record_sync"):
            self.db.execute(stmt)
            self.db.commit()
            return self.db.get(VnAssetsSync, SYNC_STATUS_ID, populate_existing=True)
