"""FMarket source: open-ended investment funds."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import ValidationError

from vnmarket.core.config import settings
from vnmarket.core.errors import ProviderError
from vnmarket.core.logging import get_logger
from vnmarket.schemas.providers import FundListing
from .base import BaseSource

log = get_logger("ingestion.fmarket")

FUND_PAGE_SIZE = 100


class FMarketSource(BaseSource):
    """Fetches the fund product listing from FMarket."""

    name = "fmarket"

    def default_base_url(self) -> str:
        return settings.FMARKET_BASE_URL

    async def list_funds(self) -> List[FundListing]:
        url = f"{self.base_url}/res/products/filter"
        payload: Dict[str, Any] = {
            "types": ["NEW_FUND", "TRADING_FUND"],
            "issuerIds": [],
            "sortOrder": "DESC",
            "sortField": "navTo6Months",
            "page": 1,
            "pageSize": FUND_PAGE_SIZE,
            "isIpo": False,
            "fundAssetTypes": [],
            "bondRemainPeriods": [],
            "searchField": "",
            "isBuyByReward": False,
            "thirdAppIds": [],
        }
        data = await self._request_json("POST", url, json=payload)

        rows = (data.get("data") or {}).get("rows") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise ProviderError(self.name, "response is missing data.rows")

        try:
            funds = [FundListing.model_validate(row) for row in rows]
        except ValidationError as exc:
            raise ProviderError(self.name, f"malformed fund record: {exc}") from exc
        log.info(f"Fetched {len(funds)} funds from FMarket")
        return funds
