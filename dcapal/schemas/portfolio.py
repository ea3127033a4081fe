"""Schemas for imported portfolio acknowledgements."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ImportPortfolioResponse(BaseModel):
    id: str = Field(..., description="Identifier to fetch the portfolio back with")
    expires_at: datetime = Field(..., description="Instant after which the portfolio is discarded")

    class Config:
        json_schema_extra = {
            "example": {
                "id": "3f2b8c1d9e4a4f6b8a7c5d3e2f1a0b9c",
                "expires_at": "2024-06-01T10:00:00+00:00",
            }
        }


__all__ = ["ImportPortfolioResponse"]
