"""Asset listings plus search and chart passthrough to the market data provider."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from dcapal.api.dependencies import get_context
from dcapal.context import AppContext
from dcapal.models import AssetKind
from dcapal.providers.yahoo import YahooError
from dcapal.schemas import AssetSchema
from dcapal.services.expiry import cache_control_seconds

router = APIRouter()
logger = logging.getLogger(__name__)


async def _list_assets(kind: AssetKind, response: Response, ctx: AppContext) -> list[AssetSchema]:
    assets = await ctx.market_data.get_assets_by_kind(kind)
    directive = cache_control_seconds(ctx.settings.assets_cache_max_age_seconds)
    response.headers["Cache-Control"] = directive.header_value()
    return [
        AssetSchema(id=asset.id, symbol=asset.symbol, name=asset.name, kind=asset.kind)
        for asset in assets
    ]


@router.get("/fiat", response_model=list[AssetSchema])
async def get_assets_fiat(response: Response, ctx: AppContext = Depends(get_context)) -> list[AssetSchema]:
    return await _list_assets(AssetKind.FIAT, response, ctx)


@router.get("/crypto", response_model=list[AssetSchema])
async def get_assets_crypto(response: Response, ctx: AppContext = Depends(get_context)) -> list[AssetSchema]:
    return await _list_assets(AssetKind.CRYPTO, response, ctx)


@router.get("/search")
async def search_assets(
    name: str = Query(..., min_length=1, max_length=64, description="Ticker or asset name"),
    ctx: AppContext = Depends(get_context),
) -> dict[str, Any]:
    logger.info(f"Searching assets with query: {name}")
    try:
        return await ctx.yahoo.search(name)
    except YahooError as exc:
        logger.error(f"Asset search failed: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@router.get("/chart/{asset}")
async def get_asset_chart(
    asset: str,
    start_period: int = Query(..., alias="startPeriod", ge=0, description="Unix seconds"),
    end_period: int = Query(..., alias="endPeriod", ge=0, description="Unix seconds"),
    ctx: AppContext = Depends(get_context),
) -> dict[str, Any]:
    if end_period < start_period:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="endPeriod must not be before startPeriod",
        )
    try:
        return await ctx.yahoo.chart(asset, start_period, end_period)
    except YahooError as exc:
        logger.error(f"Chart lookup for {asset} failed: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


__all__ = ["router"]
