"""Durable usage counters."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from dcapal.db.base import Base

IMPORTED_PORTFOLIO_COUNT = "imported_portfolio_count"


class StatsCounter(Base):
    __tablename__ = "stats_counter"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )


__all__ = ["IMPORTED_PORTFOLIO_COUNT", "StatsCounter"]
