"""Database engine and session utilities."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


class Database:
    """Own an async SQLAlchemy engine and its session factory."""

    def __init__(self, url: str, *, echo: bool = False, **engine_options: Any):
        self._url = url
        self._engine: AsyncEngine = create_async_engine(url, future=True, echo=echo, **engine_options)
        self._session_factory = async_sessionmaker(
            bind=self._engine, expire_on_commit=False, class_=AsyncSession
        )

    @property
    def url(self) -> str:
        return self._url

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory

    async def dispose(self) -> None:
        await self._engine.dispose()


__all__ = ["Database"]
