from __future__ import annotations

from decimal import Decimal
from math import isqrt

from lp_positions.domain.exceptions import InvalidArgumentError, InvalidTickError


Q96 = 1 << 96
Q128 = 1 << 128
Q192 = 1 << 192
UINT256_MAX = (1 << 256) - 1

MIN_TICK = -887272
MAX_TICK = 887272
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342

FEE_TIER_TICK_SPACING = {
    100: 1,
    500: 10,
    3000: 60,
    10000: 200,
}
DEFAULT_TICK_SPACING = 60

# sqrt(1.0001^-(2^i)) em Q128, i = 0..19
_TICK_BIT_RATIOS = (
    0xFFFCB933BD6FAD37AA2D162D1A594001,
    0xFFF97272373D413259A46990580E213A,
    0xFFF2E50F5F656932EF12357CF3C7FDCC,
    0xFFE5CACA7E10E4E61C3624EAA0941CD0,
    0xFFCB9843D60F6159C9DB58835C926644,
    0xFF973B41FA98C081472E6896DFB254C0,
    0xFF2EA16466C96A3843EC78B326B52861,
    0xFE5DEE046A99A2A811C461F1969C3053,
    0xFCBE86C7900A88AEDCFFC83B479AA3A4,
    0xF987A7253AC413176F2B074CF7815E54,
    0xF3392B0822B70005940C7A398E4B70F3,
    0xE7159475A2C29B7443B29C7FA6E889D9,
    0xD097F3BDFD2022B8845AD8F792AA5825,
    0xA9F746462D870FDF8A65DC1F90E061E5,
    0x70D869A156D2A1B890BB3DF62BAF32F7,
    0x31BE135F97D08FD981231505542FCFA6,
    0x9AA508B5B7A84E1C677DE54F3E99BC9,
    0x5D6AF8DEDB81196699C329225EE604,
    0x2216E584F5FA1EA926041BEDFE98,
    0x48A170391F7DC42444E8FA2,
)

_LOG_SQRT10001_FACTOR = 255738958999603826347141
_TICK_LOW_OFFSET = 3402992956809132418596140100660247210
_TICK_HIGH_OFFSET = 291339464771989622907027621153398088495


def parse_uint(value: int | str | Decimal | None, *, field_name: str = "value") -> int:
    if value is None:
        raise InvalidArgumentError(f"Missing {field_name}.")
    parsed = parse_int(value, field_name=field_name)
    if parsed < 0:
        raise InvalidArgumentError(f"{field_name} must be non-negative.")
    return parsed


def parse_int(value: int | str | Decimal | None, *, field_name: str = "value") -> int:
    if value is None:
        raise InvalidArgumentError(f"Missing {field_name}.")
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Unsupported {field_name} type.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise InvalidArgumentError(f"Empty {field_name} string.")
        try:
            return int(raw, 10)
        except ValueError as exc:
            raise InvalidArgumentError(f"{field_name} must be a base-10 integer string.") from exc
    if isinstance(value, Decimal):
        if not value.is_finite() or value != value.to_integral_value():
            raise InvalidArgumentError(f"Decimal {field_name} must be integral.")
        return int(value)
    raise InvalidArgumentError(f"Unsupported {field_name} type.")


def mul_div(a: int, b: int, denominator: int) -> int:
    if denominator == 0:
        raise InvalidArgumentError("mul_div denominator must be non-zero.")
    return (a * b) // denominator


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    if denominator == 0:
        raise InvalidArgumentError("mul_div denominator must be non-zero.")
    return -((-(a * b)) // denominator)


def div_round_toward_zero(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def validate_tick(tick: int, *, field_name: str = "tick") -> int:
    if isinstance(tick, bool) or not isinstance(tick, int):
        raise InvalidTickError(f"{field_name} must be an integer.")
    if tick < MIN_TICK or tick > MAX_TICK:
        raise InvalidTickError(f"{field_name} must be within [{MIN_TICK}, {MAX_TICK}].")
    return tick


def tick_to_sqrt_ratio(tick: int) -> int:
    validate_tick(tick)
    abs_tick = abs(tick)

    ratio = _TICK_BIT_RATIOS[0] if abs_tick & 1 else Q128
    for bit in range(1, len(_TICK_BIT_RATIOS)):
        if abs_tick & (1 << bit):
            ratio = (ratio * _TICK_BIT_RATIOS[bit]) >> 128

    if tick > 0:
        ratio = UINT256_MAX // ratio

    # Q128.128 -> Q64.96 arredondando para cima
    return (ratio >> 32) + (0 if ratio % (1 << 32) == 0 else 1)


def sqrt_ratio_to_tick(sqrt_ratio: int) -> int:
    if sqrt_ratio < MIN_SQRT_RATIO or sqrt_ratio >= MAX_SQRT_RATIO:
        raise InvalidTickError(
            f"sqrt_ratio must be within [{MIN_SQRT_RATIO}, {MAX_SQRT_RATIO})."
        )

    ratio = sqrt_ratio << 32
    msb = ratio.bit_length() - 1
    if msb >= 128:
        r = ratio >> (msb - 127)
    else:
        r = ratio << (127 - msb)

    log_2 = (msb - 128) << 64
    for shift in range(63, 49, -1):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << shift
        r >>= f

    log_sqrt10001 = log_2 * _LOG_SQRT10001_FACTOR
    tick_low = (log_sqrt10001 - _TICK_LOW_OFFSET) >> 128
    tick_high = (log_sqrt10001 + _TICK_HIGH_OFFSET) >> 128

    if tick_low == tick_high:
        return tick_low
    return tick_high if tick_to_sqrt_ratio(tick_high) <= sqrt_ratio else tick_low


def encode_sqrt_ratio(*, amount1: int, amount0: int) -> int:
    if amount0 <= 0 or amount1 <= 0:
        raise InvalidArgumentError("amount0 and amount1 must be positive.")
    return isqrt((amount1 << 192) // amount0)


def nearest_usable_tick(tick: int, tick_spacing: int) -> int:
    if isinstance(tick_spacing, bool) or not isinstance(tick_spacing, int) or tick_spacing <= 0:
        raise InvalidArgumentError("tick_spacing must be a positive integer.")
    validate_tick(tick)
    # arredonda meio para cima, como Math.round
    rounded = (2 * tick + tick_spacing) // (2 * tick_spacing) * tick_spacing
    if rounded < MIN_TICK:
        return rounded + tick_spacing
    if rounded > MAX_TICK:
        return rounded - tick_spacing
    return rounded


def tick_spacing_for_fee(fee: int) -> int:
    return FEE_TIER_TICK_SPACING.get(fee, DEFAULT_TICK_SPACING)


def truncated_percent(numerator: int, denominator: int) -> Decimal:
    """Percentual com 2 casas, truncado em direcao a zero."""
    if denominator <= 0:
        return Decimal("0")
    basis_points = div_round_toward_zero(numerator * 10000, denominator)
    return Decimal(basis_points) / Decimal(100)
