"""Portfolio import pipeline: parse, validate, persist, record usage."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from dcapal.core.errors import MalformedPayload
from dcapal.core.metrics import MonotonicCounter, imported_portfolios_total
from dcapal.entities import ImportedPortfolio
from dcapal.services.schema import PORTFOLIO_SCHEMA_VALIDATOR, SchemaValidator

logger = logging.getLogger(__name__)


class PortfolioStore(Protocol):
    async def store_portfolio(self, document: Any) -> ImportedPortfolio: ...

    async def find_portfolio(self, portfolio_id: str) -> ImportedPortfolio | None: ...


class ImportStats(Protocol):
    async def increase_imported_portfolio_count(self) -> None: ...


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not a JSON number")


def parse_document(raw: bytes | str) -> Any:
    # NaN and Infinity are Python extensions; JSON documents never contain them.
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise MalformedPayload(f"Payload is not valid JSON: {exc}") from exc


class PortfolioImporter:
    """Validate imported portfolios and hand them to the store.

    Schema violations abort before the store is touched. Once the store has
    accepted a document the import has succeeded: the process counter always
    moves, while the durable counter is updated on a best-effort basis.
    """

    def __init__(
        self,
        store: PortfolioStore,
        stats: ImportStats,
        *,
        validator: SchemaValidator = PORTFOLIO_SCHEMA_VALIDATOR,
        counter: MonotonicCounter = imported_portfolios_total,
    ) -> None:
        self._store = store
        self._stats = stats
        self._validator = validator
        self._counter = counter

    async def import_portfolio(self, raw: bytes | str) -> ImportedPortfolio:
        document = parse_document(raw)
        self._validator.validate(document)

        imported = await self._store.store_portfolio(document)
        logger.info("Imported portfolio %s (expires %s)", imported.id, imported.expires_at.isoformat())

        self._counter.increment()
        await self._record_import()
        return imported

    async def _record_import(self) -> None:
        try:
            await self._stats.increase_imported_portfolio_count()
        except Exception:  # best-effort: the import already succeeded
            logger.warning("Failed to update imported portfolio count", exc_info=True)

    async def get(self, portfolio_id: str) -> ImportedPortfolio | None:
        return await self._store.find_portfolio(portfolio_id)


__all__ = ["ImportStats", "PortfolioImporter", "PortfolioStore", "parse_document"]
