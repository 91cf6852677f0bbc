from __future__ import annotations

from lp_positions.domain.entities.position import (
    CurveData,
    HoldComparison,
    PnlPoint,
    PnlResult,
    PositionPhase,
    RangeStatus,
)
from lp_positions.domain.exceptions import InvalidArgumentError, InvalidPriceError
from lp_positions.domain.services.fixed_point import mul_div, truncated_percent
from lp_positions.domain.services.liquidity import calculate_position_value, validate_tick_range
from lp_positions.domain.services.price import price_to_tick, tick_to_price
from lp_positions.domain.services.token_ordering import base_is_token0


DEFAULT_PNL_CURVE_POINTS = 150
DEFAULT_CURVE_DATA_POINTS = 25
DEFAULT_CURVE_BUFFER_DIVISOR = 5


def determine_phase(current_tick: int, tick_lower: int, tick_upper: int) -> PositionPhase:
    if current_tick < tick_lower:
        return PositionPhase.BELOW
    if current_tick >= tick_upper:
        return PositionPhase.ABOVE
    return PositionPhase.IN_RANGE


def determine_range_status(current_tick: int, tick_lower: int, tick_upper: int) -> RangeStatus:
    if tick_lower <= current_tick < tick_upper:
        return RangeStatus.IN_RANGE
    if current_tick < tick_lower:
        return RangeStatus.OUT_OF_RANGE_BELOW
    return RangeStatus.OUT_OF_RANGE_ABOVE


def calculate_pnl(current_value: int, initial_value: int) -> PnlResult:
    pnl = current_value - initial_value
    return PnlResult(pnl=pnl, pnl_percent=truncated_percent(pnl, initial_value))


def calculate_position_value_at_price(
    liquidity: int,
    tick_lower: int,
    tick_upper: int,
    target_price: int,
    *,
    base_token_address: str,
    quote_token_address: str,
    base_token_decimals: int,
    tick_spacing: int,
) -> int:
    target_tick = price_to_tick(
        target_price,
        tick_spacing,
        base_token_address=base_token_address,
        quote_token_address=quote_token_address,
        base_token_decimals=base_token_decimals,
    )
    return calculate_position_value(
        liquidity,
        target_tick,
        tick_lower,
        tick_upper,
        target_price,
        base_is_token0=base_is_token0(base_token_address, quote_token_address),
        base_token_decimals=base_token_decimals,
    )


def generate_pnl_curve(
    liquidity: int,
    tick_lower: int,
    tick_upper: int,
    initial_value: int,
    *,
    base_token_address: str,
    quote_token_address: str,
    base_token_decimals: int,
    tick_spacing: int,
    price_min: int,
    price_max: int,
    num_points: int = DEFAULT_PNL_CURVE_POINTS,
) -> list[PnlPoint]:
    if num_points <= 0:
        raise InvalidArgumentError("num_points must be a positive integer.")
    if price_min <= 0:
        raise InvalidPriceError("price_min must be positive.")
    if price_max < price_min:
        raise InvalidPriceError("price_max must be greater than or equal to price_min.")
    validate_tick_range(tick_lower, tick_upper)

    base_token0 = base_is_token0(base_token_address, quote_token_address)
    span = price_max - price_min
    points: list[PnlPoint] = []
    for index in range(num_points + 1):
        price = price_min + span * index // num_points
        tick = price_to_tick(
            price,
            tick_spacing,
            base_token_address=base_token_address,
            quote_token_address=quote_token_address,
            base_token_decimals=base_token_decimals,
        )
        position_value = calculate_position_value(
            liquidity,
            tick,
            tick_lower,
            tick_upper,
            price,
            base_is_token0=base_token0,
            base_token_decimals=base_token_decimals,
        )
        result = calculate_pnl(position_value, initial_value)
        points.append(
            PnlPoint(
                price=price,
                position_value=position_value,
                pnl=result.pnl,
                pnl_percent=result.pnl_percent,
                phase=determine_phase(tick, tick_lower, tick_upper),
            )
        )
    return points


def compare_to_hold_strategy(
    position_value: int,
    initial_token0_amount: int,
    initial_token1_amount: int,
    current_price: int,
    *,
    base_is_token0: bool,
    base_token_decimals: int,
) -> HoldComparison:
    base_unit = 10**base_token_decimals
    if base_is_token0:
        hold_value = mul_div(initial_token0_amount, current_price, base_unit) + initial_token1_amount
    else:
        hold_value = initial_token0_amount + mul_div(initial_token1_amount, current_price, base_unit)
    advantage = position_value - hold_value
    return HoldComparison(
        position_value=position_value,
        hold_value=hold_value,
        advantage=advantage,
        advantage_percent=truncated_percent(advantage, hold_value),
    )


def range_prices(
    tick_lower: int,
    tick_upper: int,
    *,
    base_token_address: str,
    quote_token_address: str,
    base_token_decimals: int,
) -> tuple[int, int]:
    validate_tick_range(tick_lower, tick_upper)
    prices = [
        tick_to_price(
            tick,
            base_token_address=base_token_address,
            quote_token_address=quote_token_address,
            base_token_decimals=base_token_decimals,
        )
        for tick in (tick_lower, tick_upper)
    ]
    # com base = token1 o tick maior vira o preco menor
    return min(prices), max(prices)


def default_curve_price_range(
    lower_price: int,
    upper_price: int,
    *,
    buffer_divisor: int = DEFAULT_CURVE_BUFFER_DIVISOR,
) -> tuple[int, int]:
    if buffer_divisor <= 0:
        raise InvalidArgumentError("buffer_divisor must be a positive integer.")
    buffer = (upper_price - lower_price) // buffer_divisor
    price_min = lower_price - buffer if lower_price > buffer else lower_price // 2
    return max(price_min, 1), max(upper_price + buffer, 1)


def _closest_index(points: list[PnlPoint], target: int) -> int:
    best = 0
    for index, point in enumerate(points):
        if abs(point.price - target) < abs(points[best].price - target):
            best = index
    return best


def build_curve_data(
    liquidity: int,
    tick_lower: int,
    tick_upper: int,
    initial_value: int,
    current_price: int,
    *,
    base_token_address: str,
    quote_token_address: str,
    base_token_decimals: int,
    tick_spacing: int,
    num_points: int = DEFAULT_CURVE_DATA_POINTS,
    buffer_divisor: int = DEFAULT_CURVE_BUFFER_DIVISOR,
    price_min: int | None = None,
    price_max: int | None = None,
) -> CurveData:
    lower_price, upper_price = range_prices(
        tick_lower,
        tick_upper,
        base_token_address=base_token_address,
        quote_token_address=quote_token_address,
        base_token_decimals=base_token_decimals,
    )
    if price_min is None or price_max is None:
        price_min, price_max = default_curve_price_range(
            lower_price,
            upper_price,
            buffer_divisor=buffer_divisor,
        )
    points = generate_pnl_curve(
        liquidity,
        tick_lower,
        tick_upper,
        initial_value,
        base_token_address=base_token_address,
        quote_token_address=quote_token_address,
        base_token_decimals=base_token_decimals,
        tick_spacing=tick_spacing,
        price_min=price_min,
        price_max=price_max,
        num_points=num_points,
    )
    pnls = [point.pnl for point in points]
    return CurveData(
        points=points,
        lower_price=lower_price,
        upper_price=upper_price,
        current_price=current_price,
        price_min=points[0].price,
        price_max=points[-1].price,
        pnl_min=min(pnls),
        pnl_max=max(pnls),
        current_price_index=_closest_index(points, current_price),
        lower_index=_closest_index(points, lower_price),
        upper_index=_closest_index(points, upper_price),
    )
