from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field

from lp_positions.domain.entities.position_event import Confidence, EventType


UintString = Annotated[str, Field(pattern=r"^\d+$", description="Inteiro sem sinal em base 10.")]
IntString = Annotated[str, Field(pattern=r"^-?\d+$", description="Inteiro com sinal em base 10.")]


class TokenRequest(BaseModel):
    address: str = Field(..., description="Endereco do token (0x...).")
    decimals: int = Field(..., ge=0, le=255, description="Casas decimais do token.")


class PoolSnapshotRequest(BaseModel):
    token0: TokenRequest
    token1: TokenRequest
    tick_spacing: int | None = Field(None, gt=0, description="Tick spacing; derivado do fee_tier quando ausente.")
    fee_tier: int | None = Field(None, ge=0, description="Fee tier da pool (ex.: 500, 3000).")
    current_tick: int | None = Field(None, description="Tick atual da pool.")
    current_sqrt_price: UintString | None = Field(None, description="sqrtPriceX96 atual da pool.")


class PositionSnapshotRequest(BaseModel):
    liquidity: UintString = Field(..., description="Liquidez L da posicao.")
    tick_lower: int
    tick_upper: int
    quote_is_token0: bool = Field(..., description="Quando true, token0 e a moeda de cotacao.")


class PositionEventRequest(BaseModel):
    event_type: EventType
    timestamp: datetime
    liquidity_delta: IntString = "0"
    value_in_quote: UintString = "0"
    fee_value_in_quote: UintString | None = None
    cost_basis_after: UintString = "0"
    confidence: Confidence = Confidence.EXACT
    block_number: int = Field(0, ge=0)
    transaction_index: int = Field(0, ge=0)
    log_index: int = Field(0, ge=0)
    event_id: str | None = None
