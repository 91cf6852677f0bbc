from __future__ import annotations

import pytest

from lp_positions.domain.exceptions import InvalidAddressError, InvalidPriceError
from lp_positions.domain.services.fixed_point import MAX_TICK, MIN_TICK, tick_to_sqrt_ratio
from lp_positions.domain.services.price import (
    ScalingStrategy,
    price_to_closest_usable_tick,
    price_to_sqrt_ratio,
    price_to_tick,
    sqrt_ratio_to_quote_price,
    sqrt_ratio_to_token0_price,
    sqrt_ratio_to_token1_price,
    tick_to_price,
)
from lp_positions.domain.services.token_ordering import sort_tokens


WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
WETH_QUOTED_IN_USDC = {
    "base_token_address": WETH,
    "quote_token_address": USDC,
    "base_token_decimals": 18,
}


class TestTickToPrice:
    def test_weth_usdc_price_is_realistic(self):
        price = tick_to_price(202500, **WETH_QUOTED_IN_USDC)
        assert 1_000_000_000 < price < 3_000_000_000

    def test_tick_zero_is_unit_price_for_both_orderings(self):
        assert tick_to_price(0, base_token_address=USDC, quote_token_address=WETH, base_token_decimals=18) == 10**18
        assert tick_to_price(0, base_token_address=WETH, quote_token_address=USDC, base_token_decimals=18) == 10**18

    def test_price_falls_with_tick_when_base_is_token1(self):
        prices = [tick_to_price(tick, **WETH_QUOTED_IN_USDC) for tick in (201000, 202500, 204000)]
        assert prices[0] > prices[1] > prices[2]

    def test_price_rises_with_tick_when_base_is_token0(self):
        kwargs = {"base_token_address": USDC, "quote_token_address": WETH, "base_token_decimals": 6}
        prices = [tick_to_price(tick, **kwargs) for tick in (201000, 202500, 204000)]
        assert prices[0] < prices[1] < prices[2]

    def test_extreme_ticks_floor_to_zero_on_the_small_side(self):
        usdc_in_weth = {"base_token_address": USDC, "quote_token_address": WETH, "base_token_decimals": 6}

        assert tick_to_price(MAX_TICK, **WETH_QUOTED_IN_USDC) == 0
        assert tick_to_price(MIN_TICK, **WETH_QUOTED_IN_USDC) > 0
        assert tick_to_price(MIN_TICK, **usdc_in_weth) == 0
        assert tick_to_price(MAX_TICK, **usdc_in_weth) > 0


class TestPriceToTick:
    def test_weth_usdc_tick_is_usable_and_in_expected_band(self):
        tick = price_to_tick(1_650_000_000, 60, **WETH_QUOTED_IN_USDC)
        assert tick % 60 == 0
        assert 200000 < tick < 205000
        assert tick == 202260

    def test_closest_usable_tick_matches_for_interior_price(self):
        assert price_to_closest_usable_tick(1_650_000_000, 60, **WETH_QUOTED_IN_USDC) == 202260

    def test_closest_usable_tick_clamps_extreme_prices(self):
        tick = price_to_closest_usable_tick(
            2**200,
            60,
            base_token_address=USDC,
            quote_token_address=WETH,
            base_token_decimals=0,
        )
        assert tick == 887220

    @pytest.mark.parametrize("price", [0, -5])
    def test_non_positive_price_raises(self, price):
        with pytest.raises(InvalidPriceError):
            price_to_tick(price, 60, **WETH_QUOTED_IN_USDC)

    def test_malformed_address_raises(self):
        with pytest.raises(InvalidAddressError):
            price_to_sqrt_ratio(
                base_token_address="0x123",
                quote_token_address=USDC,
                base_token_decimals=18,
                price=1,
            )

    def test_same_token_raises(self):
        with pytest.raises(InvalidAddressError):
            price_to_sqrt_ratio(
                base_token_address=USDC,
                quote_token_address=USDC.lower(),
                base_token_decimals=6,
                price=1,
            )


class TestSqrtRatioPrices:
    def test_scaling_strategies_agree(self):
        sqrt_ratio = tick_to_sqrt_ratio(202500)
        for decimals0, decimals1 in ((6, 18), (18, 6), (8, 8), (0, 18)):
            token0_prices = {
                sqrt_ratio_to_token0_price(sqrt_ratio, decimals0, decimals1, strategy=strategy)
                for strategy in ScalingStrategy
            }
            token1_prices = {
                sqrt_ratio_to_token1_price(sqrt_ratio, decimals0, decimals1, strategy=strategy)
                for strategy in ScalingStrategy
            }
            assert len(token0_prices) == 1
            assert len(token1_prices) == 1

    def test_quote_price_from_sqrt_matches_tick_price(self):
        sqrt_ratio = tick_to_sqrt_ratio(202500)
        from_sqrt = sqrt_ratio_to_quote_price(
            sqrt_ratio,
            base_is_token0=False,
            base_token_decimals=18,
            quote_token_decimals=6,
        )
        assert from_sqrt == tick_to_price(202500, **WETH_QUOTED_IN_USDC)

    def test_token_prices_are_roughly_reciprocal(self):
        sqrt_ratio = tick_to_sqrt_ratio(202500)
        usdc_in_weth = sqrt_ratio_to_token0_price(sqrt_ratio, 6, 18)
        weth_in_usdc = sqrt_ratio_to_token1_price(sqrt_ratio, 6, 18)
        product = usdc_in_weth * weth_in_usdc
        # 1 USDC em wei x 1 WETH em unidades de USDC ~ 10^6 * 10^18
        assert abs(product - 10**24) < 10**24 // 10**6

    def test_price_round_trip_within_one_spacing(self):
        price = 1_650_000_000
        tick = price_to_tick(price, 60, **WETH_QUOTED_IN_USDC)
        back = tick_to_price(tick, **WETH_QUOTED_IN_USDC)
        # 60 ticks ~ 0.6% de preco
        assert abs(back - price) * 1000 <= price * 7


class TestTokenOrdering:
    def test_sort_tokens_orders_by_numeric_address(self):
        assert sort_tokens(WETH, USDC) == (USDC, WETH)
        assert sort_tokens(USDC, WETH) == (USDC, WETH)

    def test_sort_tokens_rejects_duplicates(self):
        with pytest.raises(InvalidAddressError):
            sort_tokens(WETH, WETH.lower())
