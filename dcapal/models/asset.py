"""Asset catalogue model."""

from __future__ import annotations

import enum

from sqlalchemy import Enum, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from dcapal.db.base import Base


class AssetKind(str, enum.Enum):
    FIAT = "fiat"
    CRYPTO = "crypto"


class AssetRecord(Base):
    __tablename__ = "asset"
    __table_args__ = (Index("ix_asset_kind", "kind"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    symbol: Mapped[str] = mapped_column(String(32), index=True)
    name: Mapped[str] = mapped_column(String(128))
    kind: Mapped[AssetKind] = mapped_column(
        Enum(AssetKind, name="asset_kind", values_callable=lambda kinds: [k.value for k in kinds])
    )


__all__ = ["AssetKind", "AssetRecord"]
