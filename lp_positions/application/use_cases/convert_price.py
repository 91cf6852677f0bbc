from __future__ import annotations

from lp_positions.application.dto.price_conversion import ConvertPriceInput, ConvertPriceOutput
from lp_positions.domain.exceptions import InvalidArgumentError
from lp_positions.domain.services.fixed_point import (
    nearest_usable_tick,
    sqrt_ratio_to_tick,
    tick_to_sqrt_ratio,
)
from lp_positions.domain.services.price import (
    price_to_closest_usable_tick,
    price_to_sqrt_ratio,
    tick_to_price,
)
from lp_positions.domain.services.token_ordering import base_is_token0


class ConvertPriceUseCase:
    def execute(self, command: ConvertPriceInput) -> ConvertPriceOutput:
        if (command.price is None) == (command.tick is None):
            raise InvalidArgumentError("Provide exactly one of price or tick.")

        tokens = {
            "base_token_address": command.base_token_address,
            "quote_token_address": command.quote_token_address,
            "base_token_decimals": command.base_token_decimals,
        }
        base_token0 = base_is_token0(command.base_token_address, command.quote_token_address)

        if command.price is not None:
            price = command.price
            sqrt_ratio = price_to_sqrt_ratio(price=price, **tokens)
            tick = sqrt_ratio_to_tick(sqrt_ratio)
            closest = price_to_closest_usable_tick(price, command.tick_spacing, **tokens)
        else:
            tick = command.tick
            sqrt_ratio = tick_to_sqrt_ratio(tick)
            price = tick_to_price(tick, **tokens)
            closest = nearest_usable_tick(tick, command.tick_spacing)

        usable_tick = nearest_usable_tick(tick, command.tick_spacing)
        return ConvertPriceOutput(
            base_is_token0=base_token0,
            sqrt_ratio=sqrt_ratio,
            tick=tick,
            usable_tick=usable_tick,
            closest_usable_tick=closest,
            price=price,
            usable_tick_price=tick_to_price(usable_tick, **tokens),
        )
