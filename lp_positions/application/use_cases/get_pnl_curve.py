from __future__ import annotations

from lp_positions.application.dto.pnl_curve import GetPnlCurveInput, GetPnlCurveOutput
from lp_positions.domain.exceptions import InvalidArgumentError
from lp_positions.domain.services.pool_state import (
    resolve_current_quote_price,
    resolve_current_tick,
    validate_pool,
)
from lp_positions.domain.services.position_valuation import (
    DEFAULT_CURVE_BUFFER_DIVISOR,
    DEFAULT_CURVE_DATA_POINTS,
    DEFAULT_PNL_CURVE_POINTS,
    build_curve_data,
)


class GetPnlCurveUseCase:
    def __init__(
        self,
        *,
        pnl_curve_points: int = DEFAULT_PNL_CURVE_POINTS,
        curve_data_points: int = DEFAULT_CURVE_DATA_POINTS,
        buffer_divisor: int = DEFAULT_CURVE_BUFFER_DIVISOR,
    ):
        self._pnl_curve_points = pnl_curve_points
        self._curve_data_points = curve_data_points
        self._buffer_divisor = buffer_divisor

    def execute(self, command: GetPnlCurveInput) -> GetPnlCurveOutput:
        if (command.price_min is None) != (command.price_max is None):
            raise InvalidArgumentError("price_min and price_max must be provided together.")
        if command.initial_value < 0:
            raise InvalidArgumentError("initial_value must be non-negative.")

        pool = validate_pool(command.pool)
        position = command.position
        base, quote = pool.base_quote_tokens(quote_is_token0=position.quote_is_token0)
        current_tick = resolve_current_tick(pool)
        current_price = resolve_current_quote_price(pool, quote_is_token0=position.quote_is_token0)

        explicit_range = command.price_min is not None
        num_points = command.num_points
        if num_points is None:
            num_points = self._pnl_curve_points if explicit_range else self._curve_data_points

        curve = build_curve_data(
            position.liquidity,
            position.tick_lower,
            position.tick_upper,
            command.initial_value,
            current_price,
            base_token_address=base.address,
            quote_token_address=quote.address,
            base_token_decimals=base.decimals,
            tick_spacing=pool.tick_spacing,
            num_points=num_points,
            buffer_divisor=self._buffer_divisor,
            price_min=command.price_min,
            price_max=command.price_max,
        )
        return GetPnlCurveOutput(current_tick=current_tick, curve=curve)
