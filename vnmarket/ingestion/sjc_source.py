"""SJC gold price source.

Not wired into the asset sync: gold quotes are read on demand and are not
cached as assets.
"""

from __future__ import annotations

from typing import List

from pydantic import ValidationError

from vnmarket.core.config import settings
from vnmarket.core.errors import ProviderError
from vnmarket.core.logging import get_logger
from vnmarket.schemas.providers import GoldPrice
from .base import BaseSource

log = get_logger("ingestion.sjc")


class SjcSource(BaseSource):
    name = "sjc"

    def default_base_url(self) -> str:
        return settings.SJC_PRICE_URL

    async def get_gold_prices(self, branch_id: int = 1) -> List[GoldPrice]:
        data = await self._request_json(
            "POST",
            self.base_url,
            data={"method": "GetCurrentGoldPricesByBranch", "BranchId": str(branch_id)},
        )
        if not isinstance(data, dict) or not data.get("success"):
            raise ProviderError(self.name, "price service reported failure")

        try:
            prices = [GoldPrice.model_validate(row) for row in data.get("data") or []]
        except ValidationError as exc:
            raise ProviderError(self.name, f"malformed price record: {exc}") from exc
        log.debug(f"Fetched {len(prices)} gold prices from SJC (branch={branch_id})")
        return prices
