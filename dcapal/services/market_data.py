"""Market data service: asset listings and cached conversion rates."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Protocol

from dcapal.entities import Asset, ConversionRate, utcnow
from dcapal.models import AssetKind
from dcapal.services.assets import AssetRepository

if TYPE_CHECKING:
    from dcapal.services.conversion import ConversionRateQuery

logger = logging.getLogger(__name__)


class RateProvider(Protocol):
    async def rate(self, base: Asset, quote: Asset) -> Decimal | None: ...


class MarketDataService:
    """Serve conversion rates from a short-lived cache in front of the provider."""

    def __init__(
        self,
        assets: AssetRepository,
        provider: RateProvider,
        *,
        rate_ttl: timedelta,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._assets = assets
        self._provider = provider
        self._rate_ttl = rate_ttl
        self._clock = clock
        self._rates: dict[tuple[str, str], ConversionRate] = {}

    async def get_assets_by_kind(self, kind: AssetKind) -> list[Asset]:
        return await self._assets.list_by_kind(kind)

    async def get_conversion_rate(self, query: ConversionRateQuery) -> ConversionRate | None:
        key = (query.base.id, query.quote.id)
        cached = self._rates.get(key)
        if cached is not None and cached.time_to_live() > timedelta(0):
            return cached

        price = await self._provider.rate(query.base, query.quote)
        if price is None:
            logger.info("No rate available for %s/%s", *key)
            self._rates.pop(key, None)
            return None

        now = self._clock()
        rate = ConversionRate(
            base=query.base,
            quote=query.quote,
            price=price,
            fetched_at=now,
            expires_at=now + self._rate_ttl,
            clock=self._clock,
        )
        self._rates[key] = rate
        return rate


__all__ = ["MarketDataService", "RateProvider"]
