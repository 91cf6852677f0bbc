from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from lp_positions.api.schemas.common import PositionEventRequest, UintString


class PositionAprRequest(BaseModel):
    position_key: str = Field(..., min_length=1, description="Identificador da posicao (ex.: chain:nft_id).")
    events: list[PositionEventRequest]
    unclaimed_fees: UintString = Field("0", description="Fees nao coletadas em quote.")


class CapitalPeriodResponse(BaseModel):
    event_id: str | None
    start: str
    end: str | None
    days: Decimal | None
    cost_basis: str
    allocated_fees: str
    period_apr: Decimal | None


class AprBreakdownResponse(BaseModel):
    realized_apr: Decimal
    realized_fees_collected: str
    realized_tw_cost_basis: str
    realized_active_days: int
    unrealized_apr: Decimal
    unrealized_fees_unclaimed: str
    unrealized_cost_basis: str
    unrealized_active_days: int
    total_apr: Decimal
    total_active_days: int
    total_tw_cost_basis: str
    calculated_at: str


class PositionAprResponse(BaseModel):
    position_key: str
    cache_status: str
    breakdown: AprBreakdownResponse
    periods: list[CapitalPeriodResponse]


class InvalidatePositionAprResponse(BaseModel):
    position_key: str
    found: bool
