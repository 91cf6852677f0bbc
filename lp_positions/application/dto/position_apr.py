from __future__ import annotations

from dataclasses import dataclass

from lp_positions.domain.entities.apr import AprBreakdown, RealizedApr
from lp_positions.domain.entities.position_event import PositionEvent


@dataclass(frozen=True)
class GetPositionAprInput:
    position_key: str
    events: list[PositionEvent]
    unclaimed_fees: int = 0


@dataclass(frozen=True)
class GetPositionAprOutput:
    position_key: str
    realized: RealizedApr
    breakdown: AprBreakdown
    cache_status: str


@dataclass(frozen=True)
class InvalidatePositionAprInput:
    position_key: str
    delete: bool = False


@dataclass(frozen=True)
class PositionAprCacheEntry:
    event_count: int
    fingerprint: str
    realized: RealizedApr
    stale: bool = False
