from __future__ import annotations

from dataclasses import dataclass

from lp_positions.domain.entities.pool import PoolSnapshot
from lp_positions.domain.entities.position import PositionPhase, PositionSnapshot, RangeStatus


@dataclass(frozen=True)
class GetPositionValuationInput:
    pool: PoolSnapshot
    position: PositionSnapshot


@dataclass(frozen=True)
class GetPositionValuationOutput:
    current_tick: int
    current_price: int
    phase: PositionPhase
    range_status: RangeStatus
    token0_amount: int
    token1_amount: int
    position_value: int
    base_token_address: str
    quote_token_address: str
    lower_price: int
    upper_price: int
    warnings: list[str]
