"""Market data service tests: cached rates and asset catalogue."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from dcapal.db.init import init_database
from dcapal.entities import Asset
from dcapal.models import AssetKind
from dcapal.services.assets import DEFAULT_ASSETS, AssetRepository
from dcapal.services.conversion import ConversionRateQuery
from dcapal.services.market_data import MarketDataService

BTC = Asset(id="btc", symbol="BTC", name="Bitcoin", kind=AssetKind.CRYPTO)
EUR = Asset(id="eur", symbol="EUR", name="Euro", kind=AssetKind.FIAT)


class CountingProvider:
    def __init__(self, *prices: Decimal | None) -> None:
        self._prices = list(prices)
        self.calls = 0

    async def rate(self, base: Asset, quote: Asset) -> Decimal | None:
        self.calls += 1
        return self._prices.pop(0)


async def test_rate_served_from_cache_until_stale(clock):
    provider = CountingProvider(Decimal("60000"), Decimal("61000"))
    service = MarketDataService(None, provider, rate_ttl=timedelta(seconds=60), clock=clock)
    query = ConversionRateQuery(base=BTC, quote=EUR)

    first = await service.get_conversion_rate(query)
    clock.advance(seconds=59)
    second = await service.get_conversion_rate(query)

    assert second is first
    assert provider.calls == 1
    assert second.time_to_live() == timedelta(seconds=1)

    clock.advance(seconds=1)
    third = await service.get_conversion_rate(query)

    assert provider.calls == 2
    assert third.price == Decimal("61000")
    assert third.expires_at == clock() + timedelta(seconds=60)


async def test_missing_rate_is_not_cached(clock):
    provider = CountingProvider(None, Decimal("0.9"))
    service = MarketDataService(None, provider, rate_ttl=timedelta(seconds=60), clock=clock)
    query = ConversionRateQuery(base=EUR, quote=BTC)

    assert await service.get_conversion_rate(query) is None
    rate = await service.get_conversion_rate(query)

    assert rate is not None and rate.price == Decimal("0.9")
    assert provider.calls == 2


async def test_seeded_catalogue_lookups(database):
    await init_database(database.engine)
    repo = AssetRepository(database.session_factory)

    assert await repo.seed() == len(DEFAULT_ASSETS)
    assert await repo.seed() == 0

    assert await repo.find_by_symbol("BTC") == BTC
    assert await repo.find_by_symbol(" eur ") == EUR
    assert await repo.find_by_symbol("doge") is None
    assert await repo.find_by_symbol("") is None

    service = MarketDataService(repo, CountingProvider(), rate_ttl=timedelta(seconds=1))
    fiat = await service.get_assets_by_kind(AssetKind.FIAT)
    crypto = await service.get_assets_by_kind(AssetKind.CRYPTO)

    assert [asset.id for asset in fiat] == sorted(a.id for a in DEFAULT_ASSETS if a.kind is AssetKind.FIAT)
    assert all(asset.kind is AssetKind.CRYPTO for asset in crypto)
    assert BTC in crypto
    await database.dispose()
