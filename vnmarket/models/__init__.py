from vnmarket.models.base import Base
from vnmarket.models.asset import AssetType, VnAsset
from vnmarket.models.sync_status import SYNC_STATUS_ID, VnAssetsSync

__all__ = [
    "Base",
    "AssetType",
    "VnAsset",
    "SYNC_STATUS_ID",
    "VnAssetsSync",
]
