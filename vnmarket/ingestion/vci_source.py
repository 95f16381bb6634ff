"""VCI (Vietcap) source: listed stocks and market indices."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import ValidationError

from vnmarket.core.config import settings
from vnmarket.core.errors import ProviderError
from vnmarket.core.logging import get_logger
from vnmarket.schemas.providers import VciSymbol
from .base import BaseSource

log = get_logger("ingestion.vci")

DELISTED_BOARD = "DELISTED"


class VciSource(BaseSource):
    """Fetches the full symbol listing from VCI."""

    name = "vci"

    def default_base_url(self) -> str:
        return settings.VCI_BASE_URL

    async def list_symbols(self) -> List[VciSymbol]:
        url = f"{self.base_url}/price/symbols/getAll"
        data = await self._request_json(
            "GET",
            url,
            headers={"Referer": "https://trading.vietcap.com.vn/", "Origin": "https://trading.vietcap.com.vn"},
        )
        if not isinstance(data, list):
            raise ProviderError(self.name, f"expected a list of symbols, got {type(data).__name__}")

        results: List[VciSymbol] = []
        for item in data:
            try:
                results.append(self._parse_symbol(item))
            except ValidationError as exc:
                raise ProviderError(self.name, f"malformed symbol record: {exc}") from exc
        log.info(f"Fetched {len(results)} symbols from VCI")
        return results

    @staticmethod
    def _parse_symbol(item: Dict[str, Any]) -> VciSymbol:
        record = dict(item)
        board = str(record.get("board") or "")
        if "listed" not in record:
            if "isListed" in record:
                record["listed"] = bool(record["isListed"])
            else:
                record["listed"] = board.upper() != DELISTED_BOARD
        return VciSymbol.model_validate(record)
