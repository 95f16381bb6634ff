"""Asset store tests: lookups, idempotent upserts, clearing, sync metadata"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session

from vnmarket.core.errors import StorageError
from vnmarket.models.asset import AssetType, VnAsset
from vnmarket.models.sync_status import SYNC_STATUS_ID, VnAssetsSync
from vnmarket.services.asset_store import SEARCH_LIMIT, AssetStore
from vnmarket.tests.factories import make_candidate


def _snapshot(store: AssetStore):
    """Everything except updated_at, keyed by symbol."""
    rows = store.db.execute(select(VnAsset).order_by(VnAsset.symbol)).scalars().all()
    return {
        r.symbol: (r.id, r.name, r.asset_type, r.exchange, r.currency, r.created_at)
        for r in rows
    }


def _naive(value: datetime) -> datetime:
    return value.replace(tzinfo=None) if value.tzinfo else value


@pytest.fixture
def broken_store():
    """Store whose database file can never be opened."""
    engine = create_engine("sqlite:////nonexistent-dir/vnmarket/cache.db")
    with Session(engine) as session:
        yield AssetStore(session)
    engine.dispose()


class TestUpsertBulk:
    """Insert-or-update semantics"""

    def test_insert_then_get(self, store):
        processed = store.upsert_bulk([make_candidate("FPT", "FPT Corp"), make_candidate("ACB", exchange="HNX")])

        assert processed == 2
        asset = store.get_by_symbol("FPT")
        assert asset is not None
        assert asset.name == "FPT Corp"
        assert asset.asset_type == AssetType.STOCK
        assert asset.exchange == "HOSE"
        assert asset.currency == "VND"
        assert asset.id
        assert asset.created_at is not None
        assert store.count() == 2

    def test_empty_batch_is_noop(self, store):
        assert store.upsert_bulk([]) == 0
        assert store.count() == 0

    def test_duplicate_symbols_last_wins(self, store):
        batch = [
            make_candidate("FPT", "First name"),
            make_candidate("ACB"),
            make_candidate("FPT", "Second name", asset_type=AssetType.INDEX, exchange="HNX"),
        ]

        # Returns candidates processed, not rows changed
        assert store.upsert_bulk(batch) == 3
        assert store.count() == 2

        asset = store.get_by_symbol("FPT")
        assert asset.name == "Second name"
        assert asset.asset_type == AssetType.INDEX
        assert asset.exchange == "HNX"

    def test_second_upsert_overwrites_mutable_fields(self, store):
        store.upsert_bulk([make_candidate("VESAF", "Old fund name", asset_type=AssetType.FUND, exchange="FUND")])
        first = store.get_by_symbol("VESAF")
        first_id, first_created = first.id, first.created_at

        store.upsert_bulk([make_candidate("VESAF", "New fund name", asset_type=AssetType.FUND, exchange="FUND")])

        rows = store.db.execute(select(VnAsset).where(VnAsset.symbol == "VESAF")).scalars().all()
        assert len(rows) == 1
        assert rows[0].name == "New fund name"
        assert rows[0].id == first_id
        assert rows[0].created_at == first_created

    def test_reapplying_batch_is_idempotent(self, store):
        batch = [
            make_candidate("FPT"),
            make_candidate("VNINDEX", "VN-Index", asset_type=AssetType.INDEX),
            make_candidate("DCDS", "DC Dynamic", asset_type=AssetType.FUND, exchange="FUND"),
        ]
        store.upsert_bulk(batch)
        before = _snapshot(store)
        first_updated = store.get_by_symbol("FPT").updated_at

        store.upsert_bulk(batch)

        assert _snapshot(store) == before
        assert store.get_by_symbol("FPT").updated_at >= first_updated

    def test_existing_currency_is_preserved(self, store):
        candidate = make_candidate("FPT")
        store.upsert_bulk([candidate])
        store.upsert_bulk([candidate.model_copy(update={"currency": "USD", "name": "Renamed"})])

        asset = store.get_by_symbol("FPT")
        assert asset.currency == "VND"
        assert asset.name == "Renamed"

    def test_batches_larger_than_chunk_size(self, db):
        store = AssetStore(db, batch_size=2)
        assert store.upsert_bulk([make_candidate(f"SYM{i}") for i in range(5)]) == 5
        assert store.count() == 5

    def test_accepts_generators(self, store):
        assert store.upsert_bulk(make_candidate(s) for s in ("AAA", "BBB")) == 2
        assert store.count() == 2

    def test_storage_failure_raises_storage_error(self, broken_store):
        with pytest.raises(StorageError):
            broken_store.upsert_bulk([make_candidate("FPT")])


class TestLookups:
    """search, get_by_symbol, get_by_type, count"""

    def test_search_matches_symbol_and_name_case_insensitively(self, store):
        store.upsert_bulk(
            [
                make_candidate("VNM", "Vinamilk"),
                make_candidate("XYZ", "VNM Partner Holdings"),
                make_candidate("FPT", "FPT Corp"),
            ]
        )

        results = store.search("vnm")

        assert sorted(a.symbol for a in results) == ["VNM", "XYZ"]

    def test_search_by_name_fragment(self, store):
        store.upsert_bulk([make_candidate("VNM", "Vinamilk"), make_candidate("FPT", "FPT Corp")])
        assert [a.symbol for a in store.search("MILK")] == ["VNM"]

    def test_search_is_capped(self, store):
        store.upsert_bulk([make_candidate(f"AAA{i:02d}") for i in range(25)])

        results = store.search("aaa")

        assert len(results) == SEARCH_LIMIT == 20

    def test_search_treats_wildcards_literally(self, store):
        store.upsert_bulk([make_candidate("FPT"), make_candidate("ACB")])
        assert store.search("%") == []
        assert store.search("_") == []

    def test_search_no_match(self, store):
        store.upsert_bulk([make_candidate("FPT")])
        assert store.search("zzz") == []

    def test_get_by_symbol_missing_returns_none(self, store):
        assert store.get_by_symbol("NOPE") is None

    def test_get_by_symbol_is_exact(self, store):
        store.upsert_bulk([make_candidate("VNM")])
        assert store.get_by_symbol("vnm") is None
        assert store.get_by_symbol("VN") is None

    def test_get_by_type(self, store):
        store.upsert_bulk(
            [
                make_candidate("FPT"),
                make_candidate("VNINDEX", asset_type=AssetType.INDEX),
                make_candidate("VESAF", asset_type=AssetType.FUND, exchange="FUND"),
                make_candidate("DCDS", asset_type=AssetType.FUND, exchange="FUND"),
            ]
        )

        assert [a.symbol for a in store.get_by_type(AssetType.FUND)] == ["DCDS", "VESAF"]
        assert [a.symbol for a in store.get_by_type("Index")] == ["VNINDEX"]
        assert [a.symbol for a in store.get_by_type(AssetType.STOCK)] == ["FPT"]

    def test_get_by_type_rejects_unknown_type(self, store):
        with pytest.raises(ValueError):
            store.get_by_type("Bond")

    def test_count_failure_raises_storage_error(self, broken_store):
        with pytest.raises(StorageError):
            broken_store.count()


class TestClearAll:
    def test_clear_all_empties_store(self, store):
        store.upsert_bulk([make_candidate("FPT"), make_candidate("ACB"), make_candidate("VNM")])

        assert store.clear_all() == 3
        assert store.count() == 0
        for symbol in ("FPT", "ACB", "VNM"):
            assert store.get_by_symbol(symbol) is None

    def test_clear_all_on_empty_store(self, store):
        assert store.clear_all() == 0

    def test_clear_keeps_sync_status(self, store):
        store.record_sync(3, datetime.now(timezone.utc))
        store.clear_all()
        assert store.get_sync_status() is not None


class TestSyncMetadata:
    def test_no_status_before_first_sync(self, store):
        assert store.get_sync_status() is None

    def test_record_sync_creates_then_updates_single_row(self, store):
        first_at = datetime.now(timezone.utc) - timedelta(minutes=5)
        second_at = datetime.now(timezone.utc)

        created = store.record_sync(10, first_at)
        assert created.id == SYNC_STATUS_ID
        assert created.sync_count == 10

        updated = store.record_sync(4, second_at)

        assert updated.sync_count == 4
        assert _naive(updated.last_synced_at) == _naive(second_at)
        assert _naive(updated.created_at) == _naive(first_at)
        total = store.db.execute(select(func.count()).select_from(VnAssetsSync)).scalar()
        assert total == 1

    def test_record_sync_failure_raises_storage_error(self, broken_store):
        with pytest.raises(StorageError):
            broken_store.record_sync(1, datetime.now(timezone.utc))
