"""Abstract source interface for provider clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from vnmarket.core.config import settings
from vnmarket.core.errors import ProviderError

DEFAULT_HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "User-Agent": "Mozilla/5.0 (compatible; vnmarket/1.0)",
}


class BaseSource(ABC):
    """Base class for upstream market-data providers.

    Subclasses expose one listing method each and use ``_request_json`` so
    every transport, status or decoding failure surfaces as ``ProviderError``.
    """

    name: str

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or self.default_base_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT_SECONDS
        self.transport = transport

    @abstractmethod
    def default_base_url(self) -> str:
        """Provider root URL used when none is passed in."""

    async def _request_json(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> Any:
        merged = {**DEFAULT_HEADERS, **(headers or {})}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.request(method, url, headers=merged, **kwargs)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(self.name, f"HTTP {exc.response.status_code} from {url}") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(self.name, f"request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(self.name, f"invalid JSON from {url}: {exc}") from exc
