from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from lp_positions.api.schemas.common import (
    PoolSnapshotRequest,
    PositionEventRequest,
    PositionSnapshotRequest,
    UintString,
)


class PositionPnlRequest(BaseModel):
    pool: PoolSnapshotRequest
    position: PositionSnapshotRequest
    events: list[PositionEventRequest]
    unclaimed_fees: UintString = Field("0", description="Fees nao coletadas em quote.")


class PositionPnlBreakdownResponse(BaseModel):
    invested: str
    withdrawn: str
    collected_fees: str
    unclaimed_fees: str
    total_fee_income: str
    current_value: str
    cost_basis: str
    realized_pnl: str
    unrealized_pnl: str
    total_pnl: str
    roi: Decimal
    realized_roi: Decimal
    confidence: str


class PositionCostBasisResponse(BaseModel):
    invested: str
    withdrawn: str
    cost_basis: str
    average_entry_price: str


class PositionEventSummaryResponse(BaseModel):
    event_count: int
    counts_by_type: dict[str, int]
    first_event_at: str
    last_event_at: str
    total_value_flow: str
    total_fees: str


class PositionEventValidationResponse(BaseModel):
    is_valid: bool
    issues: list[str]


class PositionPnlResponse(BaseModel):
    pnl: PositionPnlBreakdownResponse
    cost_basis: PositionCostBasisResponse
    summary: PositionEventSummaryResponse
    validation: PositionEventValidationResponse
