from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from lp_positions.api.schemas.common import PoolSnapshotRequest, PositionSnapshotRequest, UintString


class PositionValuationRequest(BaseModel):
    pool: PoolSnapshotRequest
    position: PositionSnapshotRequest


class PositionValuationResponse(BaseModel):
    current_tick: int
    current_price: str
    phase: str
    range_status: str
    token0_amount: str
    token1_amount: str
    position_value: str
    base_token_address: str
    quote_token_address: str
    lower_price: str
    upper_price: str
    warnings: list[str]


class PnlCurveRequest(BaseModel):
    pool: PoolSnapshotRequest
    position: PositionSnapshotRequest
    initial_value: UintString = Field(..., description="Valor inicial da posicao em quote.")
    price_min: UintString | None = Field(None, description="Preco minimo da curva.")
    price_max: UintString | None = Field(None, description="Preco maximo da curva.")
    num_points: int | None = Field(None, gt=0, le=1000)


class PnlPointResponse(BaseModel):
    price: str
    position_value: str
    pnl: str
    pnl_percent: Decimal
    phase: str


class PnlCurveResponse(BaseModel):
    current_tick: int
    current_price: str
    lower_price: str
    upper_price: str
    price_min: str
    price_max: str
    pnl_min: str
    pnl_max: str
    current_price_index: int
    lower_index: int
    upper_index: int
    points: list[PnlPointResponse]
