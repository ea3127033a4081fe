"""Portfolio import and read-back endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from dcapal.api.dependencies import get_importer
from dcapal.core.errors import MalformedPayload, SchemaViolation, StorageFailure
from dcapal.schemas import ImportPortfolioResponse
from dcapal.services.portfolio_import import PortfolioImporter

router = APIRouter()

_PORTFOLIO_EXAMPLE = {
    "name": "Long term",
    "quoteCcy": "usd",
    "fees": {"type": "variable", "feeRate": 0.1, "minFee": 1.0},
    "positions": [{"symbol": "btc", "qty": 0.25, "targetWeight": 60}],
}


@router.post(
    "/portfolio",
    response_model=ImportPortfolioResponse,
    status_code=status.HTTP_201_CREATED,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"example": _PORTFOLIO_EXAMPLE}},
        }
    },
)
async def import_portfolio(
    request: Request,
    importer: PortfolioImporter = Depends(get_importer),
) -> ImportPortfolioResponse:
    raw = await request.body()
    try:
        imported = await importer.import_portfolio(raw)
    except (MalformedPayload, SchemaViolation) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_detail()) from exc
    except StorageFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.to_detail()
        ) from exc
    return ImportPortfolioResponse(id=imported.id, expires_at=imported.expires_at)


@router.get("/portfolio/{portfolio_id}")
async def get_imported_portfolio(
    portfolio_id: str,
    importer: PortfolioImporter = Depends(get_importer),
) -> Any:
    try:
        portfolio = await importer.get(portfolio_id)
    except StorageFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.to_detail()
        ) from exc
    if portfolio is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Portfolio not found")
    return portfolio.payload


__all__ = ["router"]
