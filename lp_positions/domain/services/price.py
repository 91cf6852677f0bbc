from __future__ import annotations

from enum import Enum

from lp_positions.domain.exceptions import InvalidArgumentError, InvalidPriceError
from lp_positions.domain.services.fixed_point import (
    MAX_SQRT_RATIO,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MIN_TICK,
    Q192,
    encode_sqrt_ratio,
    mul_div,
    nearest_usable_tick,
    sqrt_ratio_to_tick,
    tick_to_sqrt_ratio,
)
from lp_positions.domain.services.token_ordering import base_is_token0


class ScalingStrategy(str, Enum):
    # floor(x * 10^d / D) direto
    MULTIPLY_THEN_DIVIDE = "multiply_then_divide"
    # floor(floor(x * 10^d_max / D) / 10^(d_max - d))
    WIDEN_THEN_NARROW = "widen_then_narrow"


def validate_decimals(decimals: int, *, field_name: str = "decimals") -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise InvalidArgumentError(f"{field_name} must be a non-negative integer.")
    return decimals


def _validate_sqrt_ratio(sqrt_ratio: int) -> int:
    if isinstance(sqrt_ratio, bool) or not isinstance(sqrt_ratio, int) or sqrt_ratio <= 0:
        raise InvalidArgumentError("sqrt_ratio must be a positive integer.")
    return sqrt_ratio


def price_to_sqrt_ratio(
    *,
    base_token_address: str,
    quote_token_address: str,
    base_token_decimals: int,
    price: int,
) -> int:
    if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
        raise InvalidPriceError("price must be a positive integer.")
    validate_decimals(base_token_decimals, field_name="base_token_decimals")
    base_unit = 10**base_token_decimals
    if base_is_token0(base_token_address, quote_token_address):
        return encode_sqrt_ratio(amount1=price, amount0=base_unit)
    return encode_sqrt_ratio(amount1=base_unit, amount0=price)


def tick_to_price(
    tick: int,
    *,
    base_token_address: str,
    quote_token_address: str,
    base_token_decimals: int,
) -> int:
    validate_decimals(base_token_decimals, field_name="base_token_decimals")
    sqrt_ratio = tick_to_sqrt_ratio(tick)
    sqrt_p2 = sqrt_ratio * sqrt_ratio
    base_unit = 10**base_token_decimals
    if base_is_token0(base_token_address, quote_token_address):
        return mul_div(sqrt_p2, base_unit, Q192)
    return mul_div(Q192, base_unit, sqrt_p2)


def price_to_tick(
    price: int,
    tick_spacing: int,
    *,
    base_token_address: str,
    quote_token_address: str,
    base_token_decimals: int,
) -> int:
    sqrt_ratio = price_to_sqrt_ratio(
        base_token_address=base_token_address,
        quote_token_address=quote_token_address,
        base_token_decimals=base_token_decimals,
        price=price,
    )
    tick_floor = sqrt_ratio_to_tick(sqrt_ratio)
    return nearest_usable_tick(tick_floor, tick_spacing)


def price_to_closest_usable_tick(
    price: int,
    tick_spacing: int,
    *,
    base_token_address: str,
    quote_token_address: str,
    base_token_decimals: int,
) -> int:
    sqrt_ratio = price_to_sqrt_ratio(
        base_token_address=base_token_address,
        quote_token_address=quote_token_address,
        base_token_decimals=base_token_decimals,
        price=price,
    )
    if sqrt_ratio < MIN_SQRT_RATIO:
        return nearest_usable_tick(MIN_TICK, tick_spacing)
    if sqrt_ratio >= MAX_SQRT_RATIO:
        return nearest_usable_tick(MAX_TICK, tick_spacing)

    t0 = sqrt_ratio_to_tick(sqrt_ratio)
    if t0 >= MAX_TICK:
        return nearest_usable_tick(MAX_TICK, tick_spacing)
    if t0 <= MIN_TICK:
        return nearest_usable_tick(MIN_TICK, tick_spacing)

    d0 = abs(sqrt_ratio - tick_to_sqrt_ratio(t0))
    d1 = abs(tick_to_sqrt_ratio(t0 + 1) - sqrt_ratio)
    # empate vai para o tick de cima
    closest = t0 if d0 < d1 else t0 + 1
    return nearest_usable_tick(closest, tick_spacing)


def select_scaling_strategy(scale_decimals: int, other_decimals: int) -> ScalingStrategy:
    if scale_decimals >= other_decimals:
        return ScalingStrategy.MULTIPLY_THEN_DIVIDE
    return ScalingStrategy.WIDEN_THEN_NARROW


def _scaled_ratio(
    numerator: int,
    denominator: int,
    *,
    scale_decimals: int,
    other_decimals: int,
    strategy: ScalingStrategy,
) -> int:
    if strategy is ScalingStrategy.MULTIPLY_THEN_DIVIDE:
        return mul_div(numerator, 10**scale_decimals, denominator)
    wide_decimals = max(scale_decimals, other_decimals)
    widened = mul_div(numerator, 10**wide_decimals, denominator)
    return widened // 10 ** (wide_decimals - scale_decimals)


def sqrt_ratio_to_token0_price(
    sqrt_ratio: int,
    token0_decimals: int,
    token1_decimals: int,
    *,
    strategy: ScalingStrategy | None = None,
) -> int:
    """Preco de 1 token0 em unidades minimas de token1."""
    _validate_sqrt_ratio(sqrt_ratio)
    validate_decimals(token0_decimals, field_name="token0_decimals")
    validate_decimals(token1_decimals, field_name="token1_decimals")
    chosen = strategy or select_scaling_strategy(token0_decimals, token1_decimals)
    return _scaled_ratio(
        sqrt_ratio * sqrt_ratio,
        Q192,
        scale_decimals=token0_decimals,
        other_decimals=token1_decimals,
        strategy=chosen,
    )


def sqrt_ratio_to_token1_price(
    sqrt_ratio: int,
    token0_decimals: int,
    token1_decimals: int,
    *,
    strategy: ScalingStrategy | None = None,
) -> int:
    """Preco de 1 token1 em unidades minimas de token0."""
    _validate_sqrt_ratio(sqrt_ratio)
    validate_decimals(token0_decimals, field_name="token0_decimals")
    validate_decimals(token1_decimals, field_name="token1_decimals")
    chosen = strategy or select_scaling_strategy(token1_decimals, token0_decimals)
    return _scaled_ratio(
        Q192,
        sqrt_ratio * sqrt_ratio,
        scale_decimals=token1_decimals,
        other_decimals=token0_decimals,
        strategy=chosen,
    )


def sqrt_ratio_to_quote_price(
    sqrt_ratio: int,
    *,
    base_is_token0: bool,
    base_token_decimals: int,
    quote_token_decimals: int,
) -> int:
    if base_is_token0:
        return sqrt_ratio_to_token0_price(sqrt_ratio, base_token_decimals, quote_token_decimals)
    return sqrt_ratio_to_token1_price(sqrt_ratio, quote_token_decimals, base_token_decimals)
