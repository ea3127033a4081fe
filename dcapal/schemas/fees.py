"""Fee structures attached to a portfolio or to individual positions."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, TypeAdapter

# Monetary amounts travel as JSON numbers (IEEE doubles) but stay Decimal in
# Python. Only the first 15 significant digits survive a round trip.
Amount = Annotated[
    Decimal,
    Field(ge=0),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class _FeeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ZeroFee(_FeeModel):
    type: Literal["zeroFee"] = "zeroFee"

    def __str__(self) -> str:
        return "ZeroFee"


class FixedFee(_FeeModel):
    type: Literal["fixed"] = "fixed"
    fee_amount: Amount = Field(alias="feeAmount")

    def __str__(self) -> str:
        return "Fixed"


class VariableFee(_FeeModel):
    """Proportional fee clamped to ``[min_fee, max_fee]``; no upper clamp when ``max_fee`` is None."""

    type: Literal["variable"] = "variable"
    fee_rate: Amount = Field(alias="feeRate")
    min_fee: Amount = Field(alias="minFee")
    max_fee: Optional[Amount] = Field(default=None, alias="maxFee")

    def __str__(self) -> str:
        return "Variable"


FeeStructure = Annotated[Union[ZeroFee, FixedFee, VariableFee], Field(discriminator="type")]

FEE_STRUCTURE_ADAPTER: TypeAdapter[FeeStructure] = TypeAdapter(FeeStructure)


def dump_fee_structure(fees: FeeStructure) -> dict:
    """Serialize with the ``type`` tag; an absent ``maxFee`` is left out, not nulled."""

    return FEE_STRUCTURE_ADAPTER.dump_python(fees, mode="json", by_alias=True, exclude_none=True)


def load_fee_structure(data: dict | str | bytes) -> FeeStructure:
    if isinstance(data, (str, bytes)):
        return FEE_STRUCTURE_ADAPTER.validate_json(data)
    return FEE_STRUCTURE_ADAPTER.validate_python(data)


__all__ = [
    "FEE_STRUCTURE_ADAPTER",
    "FeeStructure",
    "FixedFee",
    "VariableFee",
    "ZeroFee",
    "dump_fee_structure",
    "load_fee_structure",
]
