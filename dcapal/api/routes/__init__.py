"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .assets import router as assets_router
from .imports import router as imports_router
from .price import router as price_router

api_router = APIRouter()
api_router.include_router(assets_router, prefix="/assets", tags=["assets"])
api_router.include_router(price_router, prefix="/price", tags=["price"])
api_router.include_router(imports_router, prefix="/import", tags=["import"])

__all__ = ["api_router"]
