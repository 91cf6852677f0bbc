from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class CapitalPeriod:
    event_index: int
    start: datetime
    end: datetime | None
    days: Decimal | None
    cost_basis: int
    allocated_fees: int = 0
    period_apr: Decimal | None = None
    event_id: str | None = None

    @property
    def is_closed(self) -> bool:
        return self.end is not None and self.days is not None


@dataclass(frozen=True)
class RealizedApr:
    total_apr: Decimal
    time_weighted_cost_basis: int
    total_fees_collected: int
    total_active_days: int
    periods: list[CapitalPeriod]


@dataclass(frozen=True)
class AprBreakdown:
    realized_apr: Decimal
    realized_fees_collected: int
    realized_tw_cost_basis: int
    realized_active_days: int
    unrealized_apr: Decimal
    unrealized_fees_unclaimed: int
    unrealized_cost_basis: int
    unrealized_active_days: int
    total_apr: Decimal
    total_active_days: int
    total_tw_cost_basis: int
    calculated_at: datetime
