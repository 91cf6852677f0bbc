from __future__ import annotations

from lp_positions.domain.entities.pool import PoolSnapshot
from lp_positions.domain.exceptions import InvalidAddressError, InvalidArgumentError, PoolPriceNotFoundError
from lp_positions.domain.services.fixed_point import sqrt_ratio_to_tick, validate_tick
from lp_positions.domain.services.price import sqrt_ratio_to_quote_price, tick_to_price, validate_decimals
from lp_positions.domain.services.token_ordering import sort_tokens


def validate_pool(pool: PoolSnapshot) -> PoolSnapshot:
    token0, _ = sort_tokens(pool.token0.address, pool.token1.address)
    if token0 != pool.token0.address:
        raise InvalidAddressError("token0 must have the lower address.")
    validate_decimals(pool.token0.decimals, field_name="token0_decimals")
    validate_decimals(pool.token1.decimals, field_name="token1_decimals")
    if pool.tick_spacing <= 0:
        raise InvalidArgumentError("tick_spacing must be a positive integer.")
    return pool


def resolve_current_tick(pool: PoolSnapshot) -> int:
    # sqrt price prevalece sobre o tick, igual a resolve_current_quote_price
    if pool.current_sqrt_price is not None:
        return sqrt_ratio_to_tick(pool.current_sqrt_price)
    if pool.current_tick is not None:
        return validate_tick(pool.current_tick, field_name="current_tick")
    raise PoolPriceNotFoundError("Pool has no current tick or sqrt price.")


def resolve_current_quote_price(pool: PoolSnapshot, *, quote_is_token0: bool) -> int:
    base, quote = pool.base_quote_tokens(quote_is_token0=quote_is_token0)
    if pool.current_sqrt_price is not None:
        return sqrt_ratio_to_quote_price(
            pool.current_sqrt_price,
            base_is_token0=not quote_is_token0,
            base_token_decimals=base.decimals,
            quote_token_decimals=quote.decimals,
        )
    if pool.current_tick is not None:
        return tick_to_price(
            pool.current_tick,
            base_token_address=base.address,
            quote_token_address=quote.address,
            base_token_decimals=base.decimals,
        )
    raise PoolPriceNotFoundError("Pool has no current tick or sqrt price.")
