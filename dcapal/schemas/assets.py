from pydantic import BaseModel, Field

from dcapal.models import AssetKind


class AssetSchema(BaseModel):
    id: str = Field(..., examples=["btc"])
    symbol: str = Field(..., examples=["BTC"])
    name: str = Field(..., examples=["Bitcoin"])
    kind: AssetKind


__all__ = ["AssetSchema"]
