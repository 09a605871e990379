from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from valuation.coercion import parse_price_with_default

logger = logging.getLogger(__name__)


@dataclass
class BasePriceResult:
    base_price: float
    source: str = "default"
    error: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.source == "default"


class BasePriceClient:
    """Looks up a model/year base price from the pricing collaborator.

    Any failure, including an unconfigured URL, yields the default base price.
    """

    def __init__(
        self,
        base_url: str,
        default_base_price: float = 500_000,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.default_base_price = default_base_price
        self.timeout = timeout
        self._transport = transport
        self._enabled = bool(base_url)

    def _fallback(self, error: str) -> BasePriceResult:
        return BasePriceResult(base_price=self.default_base_price, error=error)

    async def get_base_price(self, model: str | None, year: Any) -> BasePriceResult:
        if not self._enabled:
            return self._fallback("pricing_not_configured")

        params = {"model": model or "", "year": "" if year is None else str(year)}
        try:
            url = f"{self.base_url}/api/estimate/base-price"
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url, params=params, headers={"Accept": "application/json"})
                resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Base price lookup failed for %s %s: %s", model, year, exc)
            return self._fallback(str(exc))

        price = parse_price_with_default(data.get("basePrice") if isinstance(data, dict) else None, 0)
        if price <= 0:
            return self._fallback("no_base_price_in_response")
        return BasePriceResult(base_price=price, source="pricing_service")
