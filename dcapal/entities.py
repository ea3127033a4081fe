"""Domain values shared by the pricing and portfolio import services."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable

from dcapal.models.asset import AssetKind


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Asset:
    """A fiat currency or crypto asset known to the catalogue."""

    id: str
    symbol: str
    name: str
    kind: AssetKind

    def matches(self, symbol: str) -> bool:
        needle = symbol.strip().lower()
        return needle in (self.id.lower(), self.symbol.lower())


@dataclass(frozen=True)
class ConversionRate:
    """Price of one unit of ``base`` expressed in ``quote``."""

    base: Asset
    quote: Asset
    price: Decimal
    fetched_at: datetime
    expires_at: datetime
    clock: Callable[[], datetime] = field(default=utcnow, repr=False, compare=False)

    def time_to_live(self) -> timedelta:
        remaining = self.expires_at - self.clock()
        return max(remaining, timedelta(0))


@dataclass(frozen=True)
class ImportedPortfolio:
    """A validated portfolio document stored under a generated identifier."""

    id: str
    expires_at: datetime
    payload: Any


__all__ = ["Asset", "AssetKind", "ConversionRate", "ImportedPortfolio", "utcnow"]
