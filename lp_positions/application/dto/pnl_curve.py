from __future__ import annotations

from dataclasses import dataclass

from lp_positions.domain.entities.pool import PoolSnapshot
from lp_positions.domain.entities.position import CurveData, PositionSnapshot


@dataclass(frozen=True)
class GetPnlCurveInput:
    pool: PoolSnapshot
    position: PositionSnapshot
    initial_value: int
    price_min: int | None = None
    price_max: int | None = None
    num_points: int | None = None


@dataclass(frozen=True)
class GetPnlCurveOutput:
    current_tick: int
    curve: CurveData
