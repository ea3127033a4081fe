"""Conversion rate quotes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from dcapal.api.dependencies import get_context
from dcapal.context import AppContext
from dcapal.core.errors import AssetNotFound, PriceNotAvailable
from dcapal.providers.yahoo import YahooError
from dcapal.schemas import PriceResponse
from dcapal.services.conversion import ConversionRateQuery, get_rate
from dcapal.services.expiry import cache_control

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/{asset}", response_model=PriceResponse)
async def get_price(
    asset: str,
    response: Response,
    quote: str = Query(..., min_length=1, max_length=32, description="Quote asset symbol"),
    ctx: AppContext = Depends(get_context),
) -> PriceResponse:
    try:
        query = await ConversionRateQuery.try_new(asset, quote, ctx.assets)
        rate = await get_rate(query, ctx.market_data)
    except (AssetNotFound, PriceNotAvailable) as exc:
        logger.info("Price lookup %s/%s failed: %s", asset, quote, exc)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.to_detail()) from exc
    except YahooError as exc:
        logger.error(f"Market data provider failed for {asset}/{quote}: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    response.headers["Cache-Control"] = cache_control(rate).header_value()
    return PriceResponse(
        base=rate.base.id,
        quote=rate.quote.id,
        price=rate.price,
        fetched_at=rate.fetched_at,
    )


__all__ = ["router"]
