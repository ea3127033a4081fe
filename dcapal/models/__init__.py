"""Database model exports."""

from .asset import AssetKind, AssetRecord
from .imported import ImportedPortfolioRecord
from .stats import IMPORTED_PORTFOLIO_COUNT, StatsCounter

__all__ = [
    "AssetKind",
    "AssetRecord",
    "ImportedPortfolioRecord",
    "IMPORTED_PORTFOLIO_COUNT",
    "StatsCounter",
]
