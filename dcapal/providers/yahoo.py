"""Yahoo Finance client used for pricing, symbol search and charts."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from dcapal.config import get_settings
from dcapal.entities import Asset
from dcapal.models import AssetKind

logger = logging.getLogger(__name__)

_USER_AGENT = "Mozilla/5.0 (compatible; dcapal-api)"


class YahooError(RuntimeError):
    """Raised when Yahoo Finance cannot be reached or returns an error payload."""


def pair_symbol(base: Asset, quote: Asset) -> tuple[str, bool]:
    """Return the Yahoo ticker pricing ``base`` in ``quote`` and whether to invert it."""

    base_sym, quote_sym = base.symbol.upper(), quote.symbol.upper()
    if base.kind is AssetKind.CRYPTO:
        return f"{base_sym}-{quote_sym}", False
    if quote.kind is AssetKind.CRYPTO:
        return f"{quote_sym}-{base_sym}", True
    return f"{base_sym}{quote_sym}=X", False


class YahooClient:
    """Thin async wrapper around the public Yahoo Finance endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.yahoo_base_url).rstrip("/")
        self._timeout = timeout_seconds if timeout_seconds is not None else settings.yahoo_timeout_seconds
        self._client = client or httpx.AsyncClient(
            timeout=self._timeout, headers={"User-Agent": _USER_AGENT}
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, Any], *, allow_missing: bool = False) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.get(url, params=params, timeout=self._timeout)
        except httpx.HTTPError as exc:
            raise YahooError(f"Failed to reach Yahoo Finance: {exc}") from exc

        if allow_missing and response.status_code == 404:
            return None
        if response.status_code >= 400:
            logger.warning("Yahoo Finance error %s for %s", response.status_code, url)
            raise YahooError(f"Yahoo Finance error {response.status_code}: {response.text}")

        try:
            return response.json()
        except ValueError as exc:
            raise YahooError("Yahoo Finance returned invalid JSON payload") from exc

    async def quote(self, symbol: str) -> Decimal | None:
        """Latest regular-market price for ``symbol``, or ``None`` if Yahoo has none."""

        payload = await self._get(
            f"/v8/finance/chart/{symbol}",
            {"range": "1d", "interval": "1d"},
            allow_missing=True,
        )
        if payload is None:
            return None
        results = (payload.get("chart") or {}).get("result") or []
        if not results:
            return None
        raw_price = (results[0].get("meta") or {}).get("regularMarketPrice")
        if raw_price is None:
            return None
        try:
            return Decimal(str(raw_price))
        except InvalidOperation as exc:
            raise YahooError(f"Unexpected price {raw_price!r} for {symbol}") from exc

    async def rate(self, base: Asset, quote: Asset) -> Decimal | None:
        """Price of one ``base`` in ``quote``."""

        if base.id == quote.id:
            return Decimal(1)
        symbol, inverted = pair_symbol(base, quote)
        price = await self.quote(symbol)
        if price is None or not inverted:
            return price
        if price == 0:
            return None
        return Decimal(1) / price

    async def search(self, name: str) -> dict[str, Any]:
        return await self._get(
            "/v1/finance/search",
            {"q": name, "quotesCount": 10, "newsCount": 0},
        )

    async def chart(self, symbol: str, start_period: int, end_period: int) -> dict[str, Any]:
        return await self._get(
            f"/v8/finance/chart/{symbol}",
            {"period1": start_period, "period2": end_period, "interval": "1d"},
        )


__all__ = ["YahooClient", "YahooError", "pair_symbol"]
