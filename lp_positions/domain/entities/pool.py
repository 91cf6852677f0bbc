from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    address: str
    decimals: int


@dataclass(frozen=True)
class PoolSnapshot:
    token0: Token
    token1: Token
    tick_spacing: int
    current_tick: int | None = None
    current_sqrt_price: int | None = None
    fee_tier: int | None = None

    def base_quote_tokens(self, *, quote_is_token0: bool) -> tuple[Token, Token]:
        if quote_is_token0:
            return self.token1, self.token0
        return self.token0, self.token1
