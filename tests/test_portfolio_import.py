"""Portfolio import pipeline tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from dcapal.core.errors import MalformedPayload, SchemaViolation, StorageFailure
from dcapal.core.metrics import MonotonicCounter
from dcapal.db.init import init_database
from dcapal.entities import ImportedPortfolio
from dcapal.models import IMPORTED_PORTFOLIO_COUNT
from dcapal.services.imported import ImportedPortfolioRepository
from dcapal.services.portfolio_import import PortfolioImporter
from dcapal.services.stats import StatsRepository


class RecordingStore:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.stored: list[Any] = []

    async def store_portfolio(self, document: Any) -> ImportedPortfolio:
        if self.error is not None:
            raise self.error
        self.stored.append(document)
        return ImportedPortfolio(
            id=f"{len(self.stored):032x}",
            expires_at=datetime.now(timezone.utc) + timedelta(days=30),
            payload=document,
        )

    async def find_portfolio(self, portfolio_id: str) -> ImportedPortfolio | None:
        return None


class RecordingStats:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls = 0

    async def increase_imported_portfolio_count(self) -> None:
        self.calls += 1
        if self.fail:
            raise RuntimeError("stats backend down")


def _importer(store=None, stats=None, counter=None) -> PortfolioImporter:
    return PortfolioImporter(
        store or RecordingStore(),
        stats or RecordingStats(),
        counter=counter or MonotonicCounter("test.imported_portfolios"),
    )


async def test_malformed_json_fails_before_validation():
    store = RecordingStore()
    with pytest.raises(MalformedPayload):
        await _importer(store).import_portfolio(b'{"positions": [')

    assert store.stored == []


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
async def test_non_finite_numbers_are_malformed(token):
    store = RecordingStore()
    with pytest.raises(MalformedPayload):
        await _importer(store).import_portfolio(f'{{"positions": [{{"symbol": "btc", "qty": {token}}}]}}')

    assert store.stored == []


async def test_deeply_nested_payload_is_malformed():
    store = RecordingStore()
    with pytest.raises(MalformedPayload):
        await _importer(store).import_portfolio(b"[" * 200000)

    assert store.stored == []


async def test_schema_violation_never_reaches_store():
    store = RecordingStore()
    stats = RecordingStats()
    counter = MonotonicCounter("test.imported_portfolios")

    with pytest.raises(SchemaViolation) as exc_info:
        await _importer(store, stats, counter).import_portfolio('{"positions": "not-an-array"}')

    assert exc_info.value.path == "/positions"
    assert store.stored == []
    assert stats.calls == 0
    assert counter.value == 0


async def test_successful_import_records_usage():
    store = RecordingStore()
    stats = RecordingStats()
    counter = MonotonicCounter("test.imported_portfolios")

    imported = await _importer(store, stats, counter).import_portfolio(b'{"positions": []}')

    assert imported.id
    assert imported.payload == {"positions": []}
    assert store.stored == [{"positions": []}]
    assert counter.value == 1
    assert stats.calls == 1


async def test_stats_failure_does_not_fail_import():
    store = RecordingStore()
    counter = MonotonicCounter("test.imported_portfolios")
    importer = _importer(store, RecordingStats(fail=True), counter)

    imported = await importer.import_portfolio(b'{"positions": []}')

    assert imported.id == f"{1:032x}"
    assert imported.payload == {"positions": []}
    assert counter.value == 1


async def test_storage_failure_propagates():
    stats = RecordingStats()
    counter = MonotonicCounter("test.imported_portfolios")
    importer = _importer(RecordingStore(error=StorageFailure("db down")), stats, counter)

    with pytest.raises(StorageFailure):
        await importer.import_portfolio(b'{"positions": []}')

    assert stats.calls == 0
    assert counter.value == 0


async def test_import_then_read_back_until_expiry(database, clock):
    await init_database(database.engine)
    repo = ImportedPortfolioRepository(database.session_factory, ttl=timedelta(days=30), clock=clock)
    stats = StatsRepository(database.session_factory)
    importer = _importer(repo, stats)
    imported_at = clock()

    imported = await importer.import_portfolio(b'{"positions": [], "name": "Core"}')

    assert len(imported.id) == 32
    assert imported.expires_at > imported_at
    assert imported.expires_at == imported_at + timedelta(days=30)

    found = await importer.get(imported.id)
    assert found is not None
    assert found.payload == {"positions": [], "name": "Core"}
    assert found.expires_at == imported.expires_at
    assert await stats.get_count(IMPORTED_PORTFOLIO_COUNT) == 1

    clock.advance(days=30)
    assert await importer.get(imported.id) is None
    assert await importer.get("does-not-exist") is None
    await database.dispose()


async def test_ids_are_unique_and_purge_only_drops_expired(database, clock):
    await init_database(database.engine)
    short = ImportedPortfolioRepository(database.session_factory, ttl=timedelta(hours=1), clock=clock)
    long = ImportedPortfolioRepository(database.session_factory, ttl=timedelta(days=1), clock=clock)

    first = await short.store_portfolio({"positions": []})
    second = await long.store_portfolio({"positions": []})
    assert first.id != second.id

    clock.advance(hours=2)
    assert await long.purge_expired() == 1
    assert await long.find_portfolio(second.id) is not None
    assert await short.find_portfolio(first.id) is None
    await database.dispose()


async def test_stats_counter_accumulates(database):
    await init_database(database.engine)
    stats = StatsRepository(database.session_factory)

    for _ in range(3):
        await stats.increase_imported_portfolio_count()

    assert await stats.get_count(IMPORTED_PORTFOLIO_COUNT) == 3
    assert await stats.get_count("unknown") == 0
    await database.dispose()


async def test_concurrent_first_increments_are_all_counted(database):
    await init_database(database.engine)
    stats = StatsRepository(database.session_factory)

    await asyncio.gather(*(stats.increment("concurrent", 2) for _ in range(5)))

    assert await stats.get_count("concurrent") == 10
    await database.dispose()
