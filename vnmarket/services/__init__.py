# Services package
from vnmarket.services.asset_store import AssetStore
from vnmarket.services.normalizer import AssetNormalizer
from vnmarket.services.sync_service import AssetSyncService

__all__ = [
    "AssetStore",
    "AssetNormalizer",
    "AssetSyncService",
]
