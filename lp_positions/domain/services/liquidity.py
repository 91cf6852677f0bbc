from __future__ import annotations

from lp_positions.domain.entities.position import TokenAmounts
from lp_positions.domain.exceptions import InvalidArgumentError, InvalidTickRangeError
from lp_positions.domain.services.fixed_point import (
    Q96,
    Q192,
    mul_div,
    mul_div_rounding_up,
    tick_to_sqrt_ratio,
    validate_tick,
)


def validate_tick_range(tick_lower: int, tick_upper: int) -> tuple[int, int]:
    validate_tick(tick_lower, field_name="tick_lower")
    validate_tick(tick_upper, field_name="tick_upper")
    if tick_lower >= tick_upper:
        raise InvalidTickRangeError("tick_lower must be lower than tick_upper.")
    return tick_lower, tick_upper


def _validate_non_negative(value: int, *, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(f"{field_name} must be a non-negative integer.")
    return value


def _ordered(sqrt_ratio_a: int, sqrt_ratio_b: int) -> tuple[int, int]:
    if sqrt_ratio_a > sqrt_ratio_b:
        return sqrt_ratio_b, sqrt_ratio_a
    return sqrt_ratio_a, sqrt_ratio_b


def amount0_from_liquidity(
    sqrt_ratio_a: int,
    sqrt_ratio_b: int,
    liquidity: int,
    *,
    round_up: bool = False,
) -> int:
    lower, upper = _ordered(sqrt_ratio_a, sqrt_ratio_b)
    if upper == lower or liquidity == 0:
        return 0
    numerator = liquidity * (upper - lower)
    denominator = upper * lower
    if round_up:
        return mul_div_rounding_up(numerator, Q96, denominator)
    return mul_div(numerator, Q96, denominator)


def amount1_from_liquidity(
    sqrt_ratio_a: int,
    sqrt_ratio_b: int,
    liquidity: int,
    *,
    round_up: bool = False,
) -> int:
    lower, upper = _ordered(sqrt_ratio_a, sqrt_ratio_b)
    if upper == lower or liquidity == 0:
        return 0
    if round_up:
        return mul_div_rounding_up(liquidity, upper - lower, Q96)
    return mul_div(liquidity, upper - lower, Q96)


def liquidity_from_amount0(sqrt_ratio_a: int, sqrt_ratio_b: int, amount0: int) -> int:
    lower, upper = _ordered(sqrt_ratio_a, sqrt_ratio_b)
    if upper == lower or amount0 <= 0:
        return 0
    return mul_div(amount0, lower * upper, Q96 * (upper - lower))


def liquidity_from_amount1(sqrt_ratio_a: int, sqrt_ratio_b: int, amount1: int) -> int:
    lower, upper = _ordered(sqrt_ratio_a, sqrt_ratio_b)
    if upper == lower or amount1 <= 0:
        return 0
    return mul_div(amount1, Q96, upper - lower)


def token_amounts_from_liquidity(
    liquidity: int,
    current_tick: int,
    tick_lower: int,
    tick_upper: int,
    *,
    round_up: bool = False,
) -> TokenAmounts:
    if liquidity == 0:
        return TokenAmounts(token0_amount=0, token1_amount=0)
    _validate_non_negative(liquidity, field_name="liquidity")
    validate_tick_range(tick_lower, tick_upper)
    validate_tick(current_tick, field_name="current_tick")

    sqrt_lower = tick_to_sqrt_ratio(tick_lower)
    sqrt_upper = tick_to_sqrt_ratio(tick_upper)

    if current_tick < tick_lower:
        return TokenAmounts(
            token0_amount=amount0_from_liquidity(sqrt_lower, sqrt_upper, liquidity, round_up=round_up),
            token1_amount=0,
        )
    if current_tick >= tick_upper:
        return TokenAmounts(
            token0_amount=0,
            token1_amount=amount1_from_liquidity(sqrt_lower, sqrt_upper, liquidity, round_up=round_up),
        )

    sqrt_current = tick_to_sqrt_ratio(current_tick)
    return TokenAmounts(
        token0_amount=amount0_from_liquidity(sqrt_current, sqrt_upper, liquidity, round_up=round_up),
        token1_amount=amount1_from_liquidity(sqrt_lower, sqrt_current, liquidity, round_up=round_up),
    )


def liquidity_from_token_amounts(
    current_tick: int,
    tick_lower: int,
    tick_upper: int,
    token0_amount: int,
    token1_amount: int,
) -> int:
    validate_tick(current_tick, field_name="current_tick")
    validate_tick_range(tick_lower, tick_upper)
    _validate_non_negative(token0_amount, field_name="token0_amount")
    _validate_non_negative(token1_amount, field_name="token1_amount")

    sqrt_lower = tick_to_sqrt_ratio(tick_lower)
    sqrt_upper = tick_to_sqrt_ratio(tick_upper)

    if current_tick < tick_lower:
        return liquidity_from_amount0(sqrt_lower, sqrt_upper, token0_amount)
    if current_tick >= tick_upper:
        return liquidity_from_amount1(sqrt_lower, sqrt_upper, token1_amount)

    sqrt_current = tick_to_sqrt_ratio(current_tick)
    liquidity0 = liquidity_from_amount0(sqrt_current, sqrt_upper, token0_amount)
    liquidity1 = liquidity_from_amount1(sqrt_lower, sqrt_current, token1_amount)
    return min(liquidity0, liquidity1)


def calculate_position_value(
    liquidity: int,
    current_tick: int,
    tick_lower: int,
    tick_upper: int,
    current_price: int,
    *,
    base_is_token0: bool,
    base_token_decimals: int,
) -> int:
    if liquidity == 0:
        return 0
    amounts = token_amounts_from_liquidity(liquidity, current_tick, tick_lower, tick_upper)
    base_unit = 10**base_token_decimals
    if base_is_token0:
        return mul_div(amounts.token0_amount, current_price, base_unit) + amounts.token1_amount
    return amounts.token0_amount + mul_div(amounts.token1_amount, current_price, base_unit)


def _budget_in_quote(
    *,
    base_amount: int,
    quote_amount: int,
    is_quote_token0: bool,
    sqrt_current: int,
) -> int:
    sqrt_p2 = sqrt_current * sqrt_current
    if is_quote_token0:
        # base = token1, quote/base = Q192 / S^2
        base_as_quote = mul_div(base_amount, Q192, sqrt_p2)
    else:
        base_as_quote = mul_div(base_amount, sqrt_p2, Q192)
    return quote_amount + base_as_quote


def liquidity_from_investment_amounts(
    *,
    base_amount: int,
    base_decimals: int,
    quote_amount: int,
    quote_decimals: int,
    is_quote_token0: bool,
    sqrt_ratio_lower: int,
    sqrt_ratio_upper: int,
    sqrt_ratio_current: int,
) -> int:
    """Liquidez suportada por um orcamento misto base + quote.

    Os valores ja estao em unidades minimas, entao os decimais nao entram
    na conta; ficam na assinatura para os chamadores que validam a entrada.
    Dentro da faixa, para orcamento V em quote, preco atual S e limites B < A:

        quote = token1: V = L * ((S - B) * A + S * (A - S)) / (A * Q96)
        quote = token0: V = L * Q96 * ((A - S) * S + (S - B) * A) / (A * S^2)

    e L sai com um unico floor.
    """
    _validate_non_negative(base_amount, field_name="base_amount")
    _validate_non_negative(quote_amount, field_name="quote_amount")
    if base_amount == 0 and quote_amount == 0:
        return 0
    if sqrt_ratio_current <= 0 or sqrt_ratio_lower <= 0 or sqrt_ratio_upper <= 0:
        raise InvalidArgumentError("sqrt ratios must be positive.")

    lower, upper = _ordered(sqrt_ratio_lower, sqrt_ratio_upper)
    current = sqrt_ratio_current
    budget = _budget_in_quote(
        base_amount=base_amount,
        quote_amount=quote_amount,
        is_quote_token0=is_quote_token0,
        sqrt_current=current,
    )

    if current <= lower:
        amount0 = budget if is_quote_token0 else mul_div(budget, Q192, current * current)
        return liquidity_from_amount0(lower, upper, amount0)

    if current >= upper:
        amount1 = mul_div(budget, current * current, Q192) if is_quote_token0 else budget
        return liquidity_from_amount1(lower, upper, amount1)

    if is_quote_token0:
        denominator = Q96 * ((upper - current) * current + (current - lower) * upper)
        return mul_div(budget, upper * current * current, denominator)
    denominator = (current - lower) * upper + current * (upper - current)
    return mul_div(budget, Q96 * upper, denominator)


def liquidity_from_investment_amounts_at_ticks(
    *,
    base_amount: int,
    base_decimals: int,
    quote_amount: int,
    quote_decimals: int,
    is_quote_token0: bool,
    tick_lower: int,
    tick_upper: int,
    sqrt_ratio_current: int,
) -> int:
    validate_tick_range(tick_lower, tick_upper)
    return liquidity_from_investment_amounts(
        base_amount=base_amount,
        base_decimals=base_decimals,
        quote_amount=quote_amount,
        quote_decimals=quote_decimals,
        is_quote_token0=is_quote_token0,
        sqrt_ratio_lower=tick_to_sqrt_ratio(tick_lower),
        sqrt_ratio_upper=tick_to_sqrt_ratio(tick_upper),
        sqrt_ratio_current=sqrt_ratio_current,
    )
