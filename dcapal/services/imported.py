"""Storage for imported portfolio documents."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dcapal.core.errors import StorageFailure
from dcapal.entities import ImportedPortfolio, utcnow
from dcapal.models import ImportedPortfolioRecord

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ImportedPortfolioRepository:
    """Persist validated portfolio documents under a generated id with an expiry."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        ttl: timedelta,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._ttl = ttl
        self._clock = clock

    async def store_portfolio(self, document: Any) -> ImportedPortfolio:
        now = self._clock()
        record = ImportedPortfolioRecord(
            id=uuid4().hex,
            payload=document,
            created_at=now,
            expires_at=now + self._ttl,
        )
        try:
            async with self._session_factory() as session:
                session.add(record)
                await session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Failed to store imported portfolio")
            raise StorageFailure("Failed to store imported portfolio") from exc
        return ImportedPortfolio(id=record.id, expires_at=_as_utc(record.expires_at), payload=document)

    async def find_portfolio(self, portfolio_id: str) -> ImportedPortfolio | None:
        """Return the stored portfolio, or ``None`` when unknown or already expired."""

        stmt = select(ImportedPortfolioRecord).where(
            ImportedPortfolioRecord.id == portfolio_id,
            ImportedPortfolioRecord.expires_at > self._clock(),
        )
        try:
            async with self._session_factory() as session:
                record = (await session.execute(stmt)).scalars().first()
        except SQLAlchemyError as exc:
            logger.exception("Failed to load imported portfolio %s", portfolio_id)
            raise StorageFailure(f"Failed to load imported portfolio {portfolio_id}") from exc
        if record is None:
            return None
        return ImportedPortfolio(id=record.id, expires_at=_as_utc(record.expires_at), payload=record.payload)

    async def purge_expired(self) -> int:
        stmt = delete(ImportedPortfolioRecord).where(ImportedPortfolioRecord.expires_at <= self._clock())
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
        purged = result.rowcount or 0
        if purged:
            logger.info("Purged %d expired imported portfolios", purged)
        return purged


__all__ = ["ImportedPortfolioRepository"]
