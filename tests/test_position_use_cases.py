from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from lp_positions.application.dto.pnl_curve import GetPnlCurveInput
from lp_positions.application.dto.position_pnl import GetPositionPnlInput
from lp_positions.application.dto.position_valuation import GetPositionValuationInput
from lp_positions.application.dto.price_conversion import ConvertPriceInput
from lp_positions.application.use_cases.convert_price import ConvertPriceUseCase
from lp_positions.application.use_cases.get_pnl_curve import GetPnlCurveUseCase
from lp_positions.application.use_cases.get_position_pnl import GetPositionPnlUseCase
from lp_positions.application.use_cases.get_position_valuation import GetPositionValuationUseCase
from lp_positions.domain.entities.pool import PoolSnapshot, Token
from lp_positions.domain.entities.position import PositionPhase, PositionSnapshot, RangeStatus
from lp_positions.domain.entities.position_event import EventType, PositionEvent
from lp_positions.domain.exceptions import (
    InvalidAddressError,
    InvalidArgumentError,
    InvalidTickRangeError,
    PoolPriceNotFoundError,
    PositionEventsNotFoundError,
)
from lp_positions.domain.services.fixed_point import tick_to_sqrt_ratio


WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


def _pool(**overrides) -> PoolSnapshot:
    data = {
        "token0": Token(address=USDC, decimals=6),
        "token1": Token(address=WETH, decimals=18),
        "tick_spacing": 60,
        "current_tick": 202500,
        "fee_tier": 3000,
    }
    data.update(overrides)
    return PoolSnapshot(**data)


def _position(**overrides) -> PositionSnapshot:
    data = {
        "liquidity": 10**18,
        "tick_lower": 201000,
        "tick_upper": 204000,
        "quote_is_token0": True,
    }
    data.update(overrides)
    return PositionSnapshot(**data)


class TestGetPositionValuationUseCase:
    def test_in_range_position(self):
        output = GetPositionValuationUseCase().execute(
            GetPositionValuationInput(pool=_pool(), position=_position())
        )

        assert output.current_tick == 202500
        assert output.phase is PositionPhase.IN_RANGE
        assert output.range_status is RangeStatus.IN_RANGE
        assert output.base_token_address == WETH
        assert output.quote_token_address == USDC
        assert 1_000_000_000 < output.current_price < 3_000_000_000
        assert output.lower_price < output.current_price < output.upper_price
        assert output.position_value == (
            output.token0_amount + output.token1_amount * output.current_price // 10**18
        )
        assert output.warnings == []

    def test_tick_is_derived_from_sqrt_price(self):
        pool = _pool(current_tick=None, current_sqrt_price=tick_to_sqrt_ratio(202500))
        output = GetPositionValuationUseCase().execute(
            GetPositionValuationInput(pool=pool, position=_position())
        )
        assert output.current_tick == 202500

    def test_sqrt_price_wins_over_stale_tick(self):
        pool = _pool(current_tick=0, current_sqrt_price=tick_to_sqrt_ratio(202500))
        output = GetPositionValuationUseCase().execute(
            GetPositionValuationInput(pool=pool, position=_position())
        )
        reference = GetPositionValuationUseCase().execute(
            GetPositionValuationInput(pool=_pool(), position=_position())
        )

        assert output.current_tick == 202500
        assert output.phase is PositionPhase.IN_RANGE
        assert output.current_price == reference.current_price
        assert output.token0_amount == reference.token0_amount
        assert output.token1_amount == reference.token1_amount
        assert output.position_value == reference.position_value

    def test_missing_pool_price_raises(self):
        with pytest.raises(PoolPriceNotFoundError):
            GetPositionValuationUseCase().execute(
                GetPositionValuationInput(pool=_pool(current_tick=None), position=_position())
            )

    def test_unsorted_pool_tokens_raise(self):
        pool = _pool(token0=Token(address=WETH, decimals=18), token1=Token(address=USDC, decimals=6))
        with pytest.raises(InvalidAddressError):
            GetPositionValuationUseCase().execute(
                GetPositionValuationInput(pool=pool, position=_position())
            )

    def test_inverted_range_raises(self):
        with pytest.raises(InvalidTickRangeError):
            GetPositionValuationUseCase().execute(
                GetPositionValuationInput(pool=_pool(), position=_position(tick_lower=204000, tick_upper=201000))
            )

    def test_price_underflow_is_reported_as_warning(self):
        pool = PoolSnapshot(
            token0=Token(address="0x" + "1" * 40, decimals=0),
            token1=Token(address="0x" + "2" * 40, decimals=0),
            tick_spacing=60,
            current_tick=120,
        )
        output = GetPositionValuationUseCase().execute(
            GetPositionValuationInput(
                pool=pool,
                position=_position(liquidity=10**6, tick_lower=-600, tick_upper=600),
            )
        )
        assert output.current_price == 0
        assert len(output.warnings) == 1


class TestGetPnlCurveUseCase:
    def test_default_range_uses_curve_data_points(self):
        output = GetPnlCurveUseCase(curve_data_points=25).execute(
            GetPnlCurveInput(pool=_pool(), position=_position(), initial_value=5 * 10**12)
        )
        assert output.current_tick == 202500
        assert len(output.curve.points) == 26

    def test_explicit_range_uses_pnl_curve_points(self):
        output = GetPnlCurveUseCase(pnl_curve_points=150).execute(
            GetPnlCurveInput(
                pool=_pool(),
                position=_position(),
                initial_value=5 * 10**12,
                price_min=1_000_000_000,
                price_max=2_500_000_000,
            )
        )
        assert len(output.curve.points) == 151
        assert output.curve.price_min == 1_000_000_000

    def test_num_points_override(self):
        output = GetPnlCurveUseCase().execute(
            GetPnlCurveInput(pool=_pool(), position=_position(), initial_value=1, num_points=4)
        )
        assert len(output.curve.points) == 5

    def test_half_open_range_raises(self):
        with pytest.raises(InvalidArgumentError):
            GetPnlCurveUseCase().execute(
                GetPnlCurveInput(pool=_pool(), position=_position(), initial_value=1, price_min=10)
            )


class TestGetPositionPnlUseCase:
    def test_combines_valuation_with_events(self):
        t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
        events = [
            PositionEvent(
                event_type=EventType.CREATE,
                timestamp=t0,
                liquidity_delta=10**18,
                value_in_quote=5 * 10**12,
                cost_basis_after=5 * 10**12,
                block_number=1,
            ),
            PositionEvent(
                event_type=EventType.COLLECT,
                timestamp=t0 + timedelta(days=3),
                liquidity_delta=0,
                value_in_quote=0,
                cost_basis_after=5 * 10**12,
                fee_value_in_quote=10**9,
                block_number=2,
            ),
        ]
        use_case = GetPositionPnlUseCase(valuation_use_case=GetPositionValuationUseCase())
        output = use_case.execute(
            GetPositionPnlInput(pool=_pool(), position=_position(), events=events, unclaimed_fees=10**8)
        )

        assert output.current_value > 0
        assert output.pnl.current_value == output.current_value
        assert output.pnl.invested == 5 * 10**12
        assert output.pnl.collected_fees == 10**9
        assert output.pnl.unrealized_pnl == output.current_value - 5 * 10**12 + 10**8
        assert output.summary.event_count == 2
        assert output.validation.is_valid is True

    def test_empty_events_raise_not_found(self):
        use_case = GetPositionPnlUseCase(valuation_use_case=GetPositionValuationUseCase())
        with pytest.raises(PositionEventsNotFoundError):
            use_case.execute(GetPositionPnlInput(pool=_pool(), position=_position(), events=[]))


class TestConvertPriceUseCase:
    def _command(self, **overrides) -> ConvertPriceInput:
        data = {
            "base_token_address": WETH,
            "quote_token_address": USDC,
            "base_token_decimals": 18,
            "tick_spacing": 60,
        }
        data.update(overrides)
        return ConvertPriceInput(**data)

    def test_price_to_ticks(self):
        output = ConvertPriceUseCase().execute(self._command(price=1_650_000_000))
        assert output.base_is_token0 is False
        assert output.usable_tick == 202260
        assert output.closest_usable_tick == 202260
        assert output.usable_tick % 60 == 0
        assert output.price == 1_650_000_000

    def test_tick_to_price(self):
        output = ConvertPriceUseCase().execute(self._command(tick=202500))
        assert output.tick == 202500
        assert output.sqrt_ratio == tick_to_sqrt_ratio(202500)
        assert 1_000_000_000 < output.price < 3_000_000_000
        assert output.usable_tick == 202500

    @pytest.mark.parametrize("overrides", [{}, {"price": 1, "tick": 0}])
    def test_requires_exactly_one_input(self, overrides):
        with pytest.raises(InvalidArgumentError):
            ConvertPriceUseCase().execute(self._command(**overrides))
