"""Schemas for conversion rate quotes."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer


class PriceResponse(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "base": "btc",
                "quote": "usd",
                "price": 64250.5,
                "fetchedAt": "2024-05-01T10:00:00Z",
            }
        },
    )

    base: str
    quote: str
    price: Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
    fetched_at: datetime = Field(alias="fetchedAt")


__all__ = ["PriceResponse"]
