from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ConvertPriceInput:
    base_token_address: str
    quote_token_address: str
    base_token_decimals: int
    tick_spacing: int
    price: int | None = None
    tick: int | None = None


@dataclass(frozen=True)
class ConvertPriceOutput:
    base_is_token0: bool
    sqrt_ratio: int
    tick: int
    usable_tick: int
    closest_usable_tick: int
    price: int
    usable_tick_price: int
