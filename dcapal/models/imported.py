"""Imported portfolio documents awaiting retrieval."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from dcapal.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ImportedPortfolioRecord(Base):
    __tablename__ = "imported_portfolio"
    __table_args__ = (Index("ix_imported_portfolio_expires_at", "expires_at"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    payload: Mapped[Any] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


__all__ = ["ImportedPortfolioRecord"]
