"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Depends, Request

from dcapal.context import AppContext
from dcapal.services.portfolio_import import PortfolioImporter


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_importer(ctx: AppContext = Depends(get_context)) -> PortfolioImporter:
    return ctx.importer


__all__ = ["get_context", "get_importer"]
