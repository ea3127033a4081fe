"""Wiring of repositories, providers and services shared by all requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from dcapal.config import AppSettings
from dcapal.db.init import init_database
from dcapal.db.session import Database
from dcapal.providers.yahoo import YahooClient
from dcapal.services.assets import AssetRepository
from dcapal.services.imported import ImportedPortfolioRepository
from dcapal.services.market_data import MarketDataService
from dcapal.services.portfolio_import import PortfolioImporter
from dcapal.services.stats import StatsRepository

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: AppSettings
    assets: Any
    market_data: Any
    yahoo: Any
    importer: PortfolioImporter
    database: Database | None = None
    imported: ImportedPortfolioRepository | None = None

    async def startup(self) -> None:
        if self.database is None:
            return
        await init_database(self.database.engine)
        if self.settings.seed_default_assets and isinstance(self.assets, AssetRepository):
            await self.assets.seed()
        if self.imported is not None:
            await self.imported.purge_expired()

    async def shutdown(self) -> None:
        if isinstance(self.yahoo, YahooClient):
            await self.yahoo.aclose()
        if self.database is not None:
            await self.database.dispose()


def build_context(settings: AppSettings) -> AppContext:
    database = Database(settings.database_url)
    assets = AssetRepository(database.session_factory)
    yahoo = YahooClient(settings.yahoo_base_url, timeout_seconds=settings.yahoo_timeout_seconds)
    imported = ImportedPortfolioRepository(
        database.session_factory,
        ttl=timedelta(days=settings.imported_portfolio_ttl_days),
    )
    stats = StatsRepository(database.session_factory)
    return AppContext(
        settings=settings,
        assets=assets,
        market_data=MarketDataService(
            assets,
            yahoo,
            rate_ttl=timedelta(seconds=settings.price_cache_ttl_seconds),
        ),
        yahoo=yahoo,
        importer=PortfolioImporter(imported, stats),
        database=database,
        imported=imported,
    )


__all__ = ["AppContext", "build_context"]
