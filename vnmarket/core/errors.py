"""Error taxonomy for the VN market asset cache.

Storage failures are fatal to the operation that hit them. Provider failures
are isolated per source by the sync service and only logged. A missing asset
is not an error: lookups return ``None``.
"""

from __future__ import annotations


class VnMarketError(Exception):
    """Base class for all errors raised by this package."""


class StorageError(VnMarketError):
    """The underlying database query or write failed."""


class SyncMetadataError(StorageError):
    """The sync bookkeeping row could not be written.

    Asset upserts that ran before the failure are already committed;
    ``persisted_count`` tells the caller how many candidates made it in.
    """

    def __init__(self, message: str, persisted_count: int = 0):
        super().__init__(message)
        self.persisted_count = persisted_count


class ProviderError(VnMarketError):
    """Fetching or parsing data from one upstream provider failed."""

    def __init__(self, source: str, message: str):
        super().__init__(f"[{source}] {message}")
        self.source = source
