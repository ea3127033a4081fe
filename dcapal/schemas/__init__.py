"""Pydantic schema exports."""

from .assets import AssetSchema
from .fees import (
    FEE_STRUCTURE_ADAPTER,
    FeeStructure,
    FixedFee,
    VariableFee,
    ZeroFee,
    dump_fee_structure,
    load_fee_structure,
)
from .portfolio import ImportPortfolioResponse
from .price import PriceResponse

__all__ = [
    "AssetSchema",
    "FEE_STRUCTURE_ADAPTER",
    "FeeStructure",
    "FixedFee",
    "VariableFee",
    "ZeroFee",
    "dump_fee_structure",
    "load_fee_structure",
    "ImportPortfolioResponse",
    "PriceResponse",
]
