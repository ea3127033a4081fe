"""Domain errors raised by the pricing and portfolio import services."""

from __future__ import annotations

from typing import Any, Iterable


class DcaError(RuntimeError):
    """Base class for errors the API translates into client-facing responses."""

    code = "dca_error"

    def to_detail(self) -> dict[str, Any]:
        return {"code": self.code, "message": str(self)}


class AssetNotFound(DcaError):
    """Raised when one or more requested symbols do not resolve to an asset."""

    code = "asset_not_found"

    def __init__(self, symbols: str | Iterable[str]) -> None:
        self.symbols: tuple[str, ...] = (symbols,) if isinstance(symbols, str) else tuple(symbols)
        super().__init__(f"Asset not found: {', '.join(self.symbols)}")

    @property
    def symbol(self) -> str:
        return self.symbols[0]

    def to_detail(self) -> dict[str, Any]:
        return {**super().to_detail(), "symbols": list(self.symbols)}


class PriceNotAvailable(DcaError):
    """Raised when the pricing service has no rate for a resolved pair."""

    code = "price_not_available"

    def __init__(self, base: str, quote: str) -> None:
        self.base = base
        self.quote = quote
        super().__init__(f"Price not available for {base}/{quote}")

    def to_detail(self) -> dict[str, Any]:
        return {**super().to_detail(), "base": self.base, "quote": self.quote}


class MalformedPayload(DcaError):
    """Raised when an import payload is not valid JSON."""

    code = "malformed_payload"


class SchemaViolation(DcaError):
    """Raised when an import payload does not conform to the portfolio schema."""

    code = "schema_violation"

    def __init__(self, path: str, rule: str, message: str) -> None:
        self.path = path
        self.rule = rule
        self.message = message
        super().__init__(f"{path or '/'}: {message} ({rule})")

    def to_detail(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "path": self.path,
            "rule": self.rule,
        }


class StorageFailure(DcaError):
    """Raised when the imported portfolio store cannot complete an operation."""

    code = "storage_failure"


__all__ = [
    "AssetNotFound",
    "DcaError",
    "MalformedPayload",
    "PriceNotAvailable",
    "SchemaViolation",
    "StorageFailure",
]
