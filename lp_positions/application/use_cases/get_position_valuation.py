from __future__ import annotations

import logging

from lp_positions.application.dto.position_valuation import (
    GetPositionValuationInput,
    GetPositionValuationOutput,
)
from lp_positions.domain.services.liquidity import (
    calculate_position_value,
    token_amounts_from_liquidity,
    validate_tick_range,
)
from lp_positions.domain.services.pool_state import (
    resolve_current_quote_price,
    resolve_current_tick,
    validate_pool,
)
from lp_positions.domain.services.position_valuation import (
    determine_phase,
    determine_range_status,
    range_prices,
)


logger = logging.getLogger(__name__)


class GetPositionValuationUseCase:
    def execute(self, command: GetPositionValuationInput) -> GetPositionValuationOutput:
        pool = validate_pool(command.pool)
        position = command.position
        validate_tick_range(position.tick_lower, position.tick_upper)

        base, quote = pool.base_quote_tokens(quote_is_token0=position.quote_is_token0)
        current_tick = resolve_current_tick(pool)
        current_price = resolve_current_quote_price(pool, quote_is_token0=position.quote_is_token0)

        warnings: list[str] = []
        if current_price == 0:
            # underflow de ponto fixo, nao e erro
            logger.warning(
                "position_valuation: price_underflow tick=%s base=%s quote=%s base_decimals=%s",
                current_tick,
                base.address,
                quote.address,
                base.decimals,
            )
            warnings.append("Current price floors to 0 for these decimals; value excludes the base side.")

        amounts = token_amounts_from_liquidity(
            position.liquidity,
            current_tick,
            position.tick_lower,
            position.tick_upper,
        )
        position_value = calculate_position_value(
            position.liquidity,
            current_tick,
            position.tick_lower,
            position.tick_upper,
            current_price,
            base_is_token0=not position.quote_is_token0,
            base_token_decimals=base.decimals,
        )
        lower_price, upper_price = range_prices(
            position.tick_lower,
            position.tick_upper,
            base_token_address=base.address,
            quote_token_address=quote.address,
            base_token_decimals=base.decimals,
        )

        return GetPositionValuationOutput(
            current_tick=current_tick,
            current_price=current_price,
            phase=determine_phase(current_tick, position.tick_lower, position.tick_upper),
            range_status=determine_range_status(current_tick, position.tick_lower, position.tick_upper),
            token0_amount=amounts.token0_amount,
            token1_amount=amounts.token1_amount,
            position_value=position_value,
            base_token_address=base.address,
            quote_token_address=quote.address,
            lower_price=lower_price,
            upper_price=upper_price,
            warnings=warnings,
        )
