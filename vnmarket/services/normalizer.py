"""Maps provider records onto the canonical asset shape."""

from __future__ import annotations

from typing import Iterable, List, Optional

from vnmarket.core.config import settings
from vnmarket.core.logging import get_logger
from vnmarket.models.asset import AssetType
from vnmarket.schemas.asset import NewAssetCandidate
from vnmarket.schemas.providers import FundListing, VciSymbol

log = get_logger("normalizer")

FUND_EXCHANGE = "FUND"


class AssetNormalizer:
    """Source-specific classification rules.

    The index check is a symbol heuristic (contains ``INDEX`` or starts with
    ``VN``) and runs before the provider's type flag, so e.g. ``VNINDEX`` is
    an index whatever VCI tags it as. Stocks whose ticker starts with
    ``VN`` (``VNM``) are classified as indices by the same rule.
    """

    def __init__(self, currency: Optional[str] = None):
        self.currency = currency or settings.DEFAULT_CURRENCY

    @staticmethod
    def classify(symbol: VciSymbol) -> Optional[AssetType]:
        """Return the asset type for a VCI record, or None if unsupported."""
        if "INDEX" in symbol.symbol or symbol.symbol.startswith("VN"):
            return AssetType.INDEX
        if symbol.is_stock():
            return AssetType.STOCK
        return None

    def normalize_listings(self, symbols: Iterable[VciSymbol]) -> List[NewAssetCandidate]:
        candidates: List[NewAssetCandidate] = []
        skipped = 0

        for symbol in symbols:
            if not symbol.listed:
                skipped += 1
                continue

            asset_type = self.classify(symbol)
            if asset_type is None:
                skipped += 1
                continue

            exchange = symbol.exchange()
            if not symbol.symbol or not exchange:
                log.debug(f"Skipping listing without symbol or board: {symbol!r}")
                skipped += 1
                continue

            candidates.append(
                NewAssetCandidate(
                    symbol=symbol.symbol,
                    name=symbol.display_name(),
                    asset_type=asset_type,
                    exchange=exchange,
                    currency=self.currency,
                )
            )

        log.debug(f"Normalized {len(candidates)} listings (skipped={skipped})")
        return candidates

    def normalize_funds(self, funds: Iterable[FundListing]) -> List[NewAssetCandidate]:
        candidates: List[NewAssetCandidate] = []
        for fund in funds:
            if not fund.short_name:
                log.debug(f"Skipping fund without short name: {fund.name}")
                continue
            candidates.append(
                NewAssetCandidate(
                    symbol=fund.short_name,
                    name=fund.name,
                    asset_type=AssetType.FUND,
                    exchange=FUND_EXCHANGE,
                    currency=self.currency,
                )
            )
        return candidates
