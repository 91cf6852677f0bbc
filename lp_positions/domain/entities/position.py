from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class PositionPhase(str, Enum):
    BELOW = "below"
    IN_RANGE = "in-range"
    ABOVE = "above"


class RangeStatus(str, Enum):
    IN_RANGE = "in-range"
    OUT_OF_RANGE_BELOW = "out-of-range-below"
    OUT_OF_RANGE_ABOVE = "out-of-range-above"


@dataclass(frozen=True)
class PositionSnapshot:
    liquidity: int
    tick_lower: int
    tick_upper: int
    quote_is_token0: bool


@dataclass(frozen=True)
class TokenAmounts:
    token0_amount: int
    token1_amount: int


@dataclass(frozen=True)
class PnlResult:
    pnl: int
    pnl_percent: Decimal


@dataclass(frozen=True)
class PnlPoint:
    price: int
    position_value: int
    pnl: int
    pnl_percent: Decimal
    phase: PositionPhase


@dataclass(frozen=True)
class HoldComparison:
    position_value: int
    hold_value: int
    advantage: int
    advantage_percent: Decimal


@dataclass(frozen=True)
class CurveData:
    points: list[PnlPoint]
    lower_price: int
    upper_price: int
    current_price: int
    price_min: int
    price_max: int
    pnl_min: int
    pnl_max: int
    current_price_index: int
    lower_index: int
    upper_index: int
