"""Resolve a base/quote pair and look up its conversion rate."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol

from dcapal.core.errors import AssetNotFound, PriceNotAvailable
from dcapal.entities import Asset, ConversionRate


class AssetLookup(Protocol):
    async def find_by_symbol(self, symbol: str) -> Asset | None: ...


class PricingService(Protocol):
    async def get_conversion_rate(self, query: ConversionRateQuery) -> ConversionRate | None: ...


@dataclass(frozen=True)
class ConversionRateQuery:
    base: Asset
    quote: Asset

    @classmethod
    async def try_new(cls, base_symbol: str, quote_symbol: str, repo: AssetLookup) -> ConversionRateQuery:
        """Resolve both symbols; raise ``AssetNotFound`` naming every one that is unknown."""

        base, quote = await asyncio.gather(
            repo.find_by_symbol(base_symbol),
            repo.find_by_symbol(quote_symbol),
        )
        if base is None or quote is None:
            raise AssetNotFound(
                [symbol for symbol, asset in ((base_symbol, base), (quote_symbol, quote)) if asset is None]
            )
        return cls(base=base, quote=quote)


async def get_rate(query: ConversionRateQuery, pricing: PricingService) -> ConversionRate:
    rate = await pricing.get_conversion_rate(query)
    if rate is None:
        raise PriceNotAvailable(query.base.id, query.quote.id)
    return rate


__all__ = ["AssetLookup", "ConversionRateQuery", "PricingService", "get_rate"]
