from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from lp_positions.domain.entities.position_event import Confidence, EventType


@dataclass(frozen=True)
class EventPnl:
    invested: int
    withdrawn: int
    collected_fees: int
    unclaimed_fees: int
    total_fee_income: int
    current_value: int
    cost_basis: int
    withdrawn_cost_basis: int
    realized_pnl: int
    unrealized_pnl: int
    total_pnl: int
    roi: Decimal
    realized_roi: Decimal
    confidence: Confidence
    event_count: int


@dataclass(frozen=True)
class CostBasisSummary:
    invested: int
    withdrawn: int
    cost_basis: int
    average_entry_price: int


@dataclass(frozen=True)
class EventSummary:
    event_count: int
    counts_by_type: dict[EventType, int]
    first_event_at: datetime
    last_event_at: datetime
    total_invested: int
    total_withdrawn: int
    total_value_flow: int
    total_fees: int


@dataclass(frozen=True)
class EventValidation:
    is_valid: bool
    issues: list[str]
    event_count: int
