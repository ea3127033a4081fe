"""Durable usage statistics."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dcapal.entities import utcnow
from dcapal.models import IMPORTED_PORTFOLIO_COUNT, StatsCounter

_UPSERT_DIALECTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


def _increment_statement(dialect: str, name: str, amount: int):
    try:
        insert = _UPSERT_DIALECTS[dialect]
    except KeyError as exc:
        raise NotImplementedError(f"Stats counters are not supported on {dialect}") from exc

    statement = insert(StatsCounter).values(name=name, value=amount, updated_at=utcnow())
    # Concurrent first increments for a name both land on the same row.
    return statement.on_conflict_do_update(
        index_elements=[StatsCounter.name],
        set_={
            "value": StatsCounter.value + statement.excluded.value,
            "updated_at": statement.excluded.updated_at,
        },
    )


class StatsRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def increment(self, name: str, amount: int = 1) -> None:
        async with self._session_factory() as session:
            dialect = session.get_bind().dialect.name
            await session.execute(_increment_statement(dialect, name, amount))
            await session.commit()

    async def get_count(self, name: str) -> int:
        async with self._session_factory() as session:
            value = (
                await session.execute(select(StatsCounter.value).where(StatsCounter.name == name))
            ).scalar_one_or_none()
        return value or 0

    async def increase_imported_portfolio_count(self) -> None:
        await self.increment(IMPORTED_PORTFOLIO_COUNT)


__all__ = ["StatsRepository"]
