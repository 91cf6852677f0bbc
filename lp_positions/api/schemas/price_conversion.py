from __future__ import annotations

from pydantic import BaseModel, Field

from lp_positions.api.schemas.common import UintString


class ConvertPriceRequest(BaseModel):
    base_token_address: str = Field(..., description="Endereco do token base.")
    quote_token_address: str = Field(..., description="Endereco do token de cotacao.")
    base_token_decimals: int = Field(..., ge=0, le=255)
    tick_spacing: int = Field(..., gt=0)
    price: UintString | None = Field(None, description="Preco em unidades minimas do quote por 1 base.")
    tick: int | None = Field(None, description="Tick a converter.")


class ConvertPriceResponse(BaseModel):
    base_is_token0: bool
    sqrt_ratio: str
    tick: int
    usable_tick: int
    closest_usable_tick: int
    price: str
    usable_tick_price: str
