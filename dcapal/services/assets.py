"""Asset catalogue backed by the ``asset`` table."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dcapal.entities import Asset
from dcapal.models import AssetKind, AssetRecord

logger = logging.getLogger(__name__)

DEFAULT_ASSETS: tuple[Asset, ...] = (
    Asset(id="usd", symbol="USD", name="US Dollar", kind=AssetKind.FIAT),
    Asset(id="eur", symbol="EUR", name="Euro", kind=AssetKind.FIAT),
    Asset(id="gbp", symbol="GBP", name="British Pound", kind=AssetKind.FIAT),
    Asset(id="chf", symbol="CHF", name="Swiss Franc", kind=AssetKind.FIAT),
    Asset(id="jpy", symbol="JPY", name="Japanese Yen", kind=AssetKind.FIAT),
    Asset(id="cad", symbol="CAD", name="Canadian Dollar", kind=AssetKind.FIAT),
    Asset(id="aud", symbol="AUD", name="Australian Dollar", kind=AssetKind.FIAT),
    Asset(id="btc", symbol="BTC", name="Bitcoin", kind=AssetKind.CRYPTO),
    Asset(id="eth", symbol="ETH", name="Ethereum", kind=AssetKind.CRYPTO),
    Asset(id="sol", symbol="SOL", name="Solana", kind=AssetKind.CRYPTO),
    Asset(id="ada", symbol="ADA", name="Cardano", kind=AssetKind.CRYPTO),
    Asset(id="xrp", symbol="XRP", name="XRP", kind=AssetKind.CRYPTO),
    Asset(id="dot", symbol="DOT", name="Polkadot", kind=AssetKind.CRYPTO),
    Asset(id="ltc", symbol="LTC", name="Litecoin", kind=AssetKind.CRYPTO),
)


def _to_asset(record: AssetRecord) -> Asset:
    return Asset(id=record.id, symbol=record.symbol, name=record.name, kind=AssetKind(record.kind))


class AssetRepository:
    """Look up fiat and crypto assets by symbol or kind."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_symbol(self, symbol: str) -> Asset | None:
        normalized = symbol.strip().lower()
        if not normalized:
            return None
        stmt = select(AssetRecord).where(
            or_(AssetRecord.id == normalized, func.lower(AssetRecord.symbol) == normalized)
        )
        async with self._session_factory() as session:
            record = (await session.execute(stmt)).scalars().first()
        return _to_asset(record) if record is not None else None

    async def list_by_kind(self, kind: AssetKind) -> list[Asset]:
        stmt = select(AssetRecord).where(AssetRecord.kind == kind).order_by(AssetRecord.id)
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).scalars().all()
        return [_to_asset(row) for row in rows]

    async def seed(self, assets: Iterable[Asset] = DEFAULT_ASSETS) -> int:
        """Insert assets missing from the catalogue; existing rows are left untouched."""

        wanted = {asset.id: asset for asset in assets}
        if not wanted:
            return 0
        async with self._session_factory() as session:
            existing = set(
                (await session.execute(select(AssetRecord.id).where(AssetRecord.id.in_(list(wanted))))).scalars()
            )
            missing = [asset for asset_id, asset in wanted.items() if asset_id not in existing]
            for asset in missing:
                session.add(
                    AssetRecord(id=asset.id, symbol=asset.symbol, name=asset.name, kind=asset.kind)
                )
            await session.commit()
        if missing:
            logger.info("Seeded %d assets into the catalogue", len(missing))
        return len(missing)


__all__ = ["AssetRepository", "DEFAULT_ASSETS"]
