"""Cache directives derived from a value's remaining time-to-live."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol, runtime_checkable


@runtime_checkable
class Expiring(Protocol):
    """Anything that can report how long it stays fresh."""

    def time_to_live(self) -> timedelta: ...


@dataclass(frozen=True)
class CacheDirective:
    max_age: int
    public: bool = True

    def header_value(self) -> str:
        visibility = "public" if self.public else "private"
        return f"{visibility}, max-age={self.max_age}"

    def __str__(self) -> str:
        return self.header_value()


def cache_control_seconds(seconds: int | float) -> CacheDirective:
    """Public directive with a fixed ``max-age``; fractions are truncated."""

    return CacheDirective(max_age=max(int(seconds), 0))


def cache_control(value: Expiring) -> CacheDirective:
    """Public directive whose ``max-age`` is the value's whole seconds left to live."""

    return cache_control_seconds(value.time_to_live().total_seconds())


__all__ = ["CacheDirective", "Expiring", "cache_control", "cache_control_seconds"]
