from __future__ import annotations

from dataclasses import dataclass

from lp_positions.domain.entities.pnl import CostBasisSummary, EventPnl, EventSummary, EventValidation
from lp_positions.domain.entities.pool import PoolSnapshot
from lp_positions.domain.entities.position import PositionSnapshot
from lp_positions.domain.entities.position_event import PositionEvent


@dataclass(frozen=True)
class GetPositionPnlInput:
    pool: PoolSnapshot
    position: PositionSnapshot
    events: list[PositionEvent]
    unclaimed_fees: int = 0


@dataclass(frozen=True)
class GetPositionPnlOutput:
    current_value: int
    pnl: EventPnl
    cost_basis: CostBasisSummary
    summary: EventSummary
    validation: EventValidation
