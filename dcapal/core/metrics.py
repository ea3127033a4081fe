"""Process-wide counters exported through the OpenTelemetry metrics API."""

from __future__ import annotations

import weakref

from opentelemetry import metrics
from opentelemetry.metrics import Meter, MeterProvider

IMPORTED_PORTFOLIOS_TOTAL = "dcapal.imported_portfolios.total"

_METER_NAME = "dcapal"

_meter: Meter = metrics.get_meter(_METER_NAME)
_counters: "weakref.WeakSet[MonotonicCounter]" = weakref.WeakSet()


class MonotonicCounter:
    """OpenTelemetry counter that also keeps the running total for this process.

    The local total resets on restart; only the exported stream is meant for
    dashboards.
    """

    def __init__(self, name: str, description: str = "", unit: str = "1") -> None:
        self.name = name
        self.description = description
        self.unit = unit
        self._value = 0
        self._instrument = self._create_instrument(_meter)
        _counters.add(self)

    def _create_instrument(self, meter: Meter):
        return meter.create_counter(self.name, unit=self.unit, description=self.description)

    @property
    def value(self) -> int:
        return self._value

    def increment(self, amount: int = 1) -> None:
        if amount < 0:
            raise ValueError("Counters only increase")
        self._instrument.add(amount)
        self._value += amount

    def rebind(self, meter: Meter) -> None:
        self._instrument = self._create_instrument(meter)


def bind_meter_provider(provider: MeterProvider | None) -> None:
    """Send every counter, existing and future, to ``provider``.

    ``None`` goes back to the global provider.
    """

    global _meter  # noqa: PLW0603 - module-wide meter shared by all counters

    _meter = (provider or metrics.get_meter_provider()).get_meter(_METER_NAME)
    for counter in list(_counters):
        counter.rebind(_meter)


imported_portfolios_total = MonotonicCounter(
    IMPORTED_PORTFOLIOS_TOTAL,
    description="Portfolios imported since process start",
)


__all__ = [
    "IMPORTED_PORTFOLIOS_TOTAL",
    "MonotonicCounter",
    "bind_meter_provider",
    "imported_portfolios_total",
]
