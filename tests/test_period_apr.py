from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from lp_positions.domain.entities.apr import CapitalPeriod
from lp_positions.domain.entities.position_event import EventType, PositionEvent
from lp_positions.domain.exceptions import InvalidArgumentError
from lp_positions.domain.services.period_apr import (
    aggregate_realized_apr,
    annualized_apr,
    apply_event_to_periods,
    build_capital_periods,
    calculate_realized_apr,
    compute_apr_breakdown,
    days_between,
    distribute_collect_fees,
)


T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
TOLERANCE = Decimal("0.0001")


def _event(event_type: EventType, day: float, block: int, cost_basis_after: int, fee: int | None = None):
    return PositionEvent(
        event_type=event_type,
        timestamp=T0 + timedelta(days=day),
        liquidity_delta=0,
        value_in_quote=0,
        cost_basis_after=cost_basis_after,
        fee_value_in_quote=fee,
        block_number=block,
        event_id=f"evt-{block}",
    )


def _events() -> list[PositionEvent]:
    return [
        _event(EventType.CREATE, 0, 1, 1000),
        _event(EventType.INCREASE, 10, 2, 2000),
        _event(EventType.COLLECT, 20, 3, 2000, fee=300),
    ]


class TestCapitalPeriods:
    def test_periods_close_at_next_event(self):
        periods = build_capital_periods(_events())
        assert len(periods) == 3
        assert periods[0].end == T0 + timedelta(days=10)
        assert periods[0].days == Decimal("10")
        assert periods[2].end is None
        assert periods[2].days is None
        assert [period.cost_basis for period in periods] == [1000, 2000, 2000]

    def test_fees_split_by_cost_basis_and_duration(self):
        realized = calculate_realized_apr(_events())
        allocated = [period.allocated_fees for period in realized.periods]
        assert allocated == [100, 200, 0]
        assert abs(realized.periods[0].period_apr - Decimal("365")) < TOLERANCE
        assert abs(realized.periods[1].period_apr - Decimal("365")) < TOLERANCE
        assert realized.periods[2].period_apr is None

    def test_zero_weight_collect_is_skipped(self):
        periods = [
            CapitalPeriod(
                event_index=0,
                start=T0,
                end=T0 + timedelta(days=1),
                days=Decimal("1"),
                cost_basis=0,
            )
        ]
        result = distribute_collect_fees(periods, collected_at=T0 + timedelta(days=1), fee_value=50)
        assert result == periods

    def test_collect_ignores_periods_starting_after_it(self):
        periods = [
            CapitalPeriod(
                event_index=0,
                start=T0 + timedelta(days=5),
                end=T0 + timedelta(days=6),
                days=Decimal("1"),
                cost_basis=100,
            )
        ]
        result = distribute_collect_fees(periods, collected_at=T0 + timedelta(days=2), fee_value=50)
        assert result[0].allocated_fees == 0


class TestRealizedApr:
    def test_time_weighted_totals(self):
        realized = calculate_realized_apr(_events())
        assert realized.time_weighted_cost_basis == 1500
        assert realized.total_fees_collected == 300
        assert realized.total_active_days == 20
        assert abs(realized.total_apr - Decimal("365")) < TOLERANCE

    def test_active_days_round_half_up(self):
        events = [
            _event(EventType.CREATE, 0, 1, 1000),
            _event(EventType.COLLECT, 2.5, 2, 1000, fee=10),
        ]
        realized = calculate_realized_apr(events)
        assert realized.total_active_days == 3

    def test_incremental_update_matches_full_recompute(self):
        events = _events()
        cached = calculate_realized_apr(events[:2])
        periods = apply_event_to_periods(cached.periods, events[2])
        incremental = aggregate_realized_apr(periods)
        assert incremental == calculate_realized_apr(events)

    def test_incremental_rejects_older_event(self):
        cached = calculate_realized_apr(_events())
        stale = _event(EventType.COLLECT, 5, 9, 2000, fee=1)
        with pytest.raises(InvalidArgumentError):
            apply_event_to_periods(cached.periods, stale)

    def test_annualized_apr_guards(self):
        assert annualized_apr(0, 1000, Decimal("10")) == Decimal("0")
        assert annualized_apr(10, 0, Decimal("10")) == Decimal("0")
        assert annualized_apr(10, 1000, Decimal("0")) == Decimal("0")

    def test_days_between_is_fractional(self):
        assert days_between(T0, T0 + timedelta(hours=36)) == Decimal("1.5")


class TestAprBreakdown:
    def test_breakdown_blends_realized_and_unrealized(self):
        now = T0 + timedelta(days=25)
        breakdown = compute_apr_breakdown(_events(), unclaimed_fees=100, now=now)

        assert breakdown.realized_active_days == 20
        assert breakdown.realized_fees_collected == 300
        assert breakdown.realized_tw_cost_basis == 1500
        assert breakdown.unrealized_active_days == 5
        assert breakdown.unrealized_cost_basis == 2000
        assert breakdown.unrealized_fees_unclaimed == 100
        assert abs(breakdown.unrealized_apr - Decimal("365")) < TOLERANCE
        assert breakdown.total_active_days == 25
        assert breakdown.total_tw_cost_basis == 1600
        assert abs(breakdown.total_apr - Decimal("365")) < TOLERANCE
        assert breakdown.calculated_at == now

    def test_breakdown_without_collects_is_unrealized_only(self):
        events = [_event(EventType.CREATE, 0, 1, 1000)]
        now = T0 + timedelta(days=3, hours=12)
        breakdown = compute_apr_breakdown(events, unclaimed_fees=10, now=now)

        assert breakdown.realized_apr == Decimal("0")
        assert breakdown.realized_active_days == 0
        assert breakdown.unrealized_active_days == 3
        assert breakdown.total_active_days == 3
        assert breakdown.total_apr == breakdown.unrealized_apr
        assert breakdown.total_tw_cost_basis == 1000
        assert breakdown.unrealized_apr > 0

    def test_breakdown_for_closed_position_has_no_open_period(self):
        events = [
            _event(EventType.CREATE, 0, 1, 1000),
            _event(EventType.COLLECT, 10, 2, 1000, fee=50),
            _event(EventType.CLOSE, 20, 3, 0),
        ]
        breakdown = compute_apr_breakdown(events, unclaimed_fees=0, now=T0 + timedelta(days=30))
        assert breakdown.unrealized_active_days == 0
        assert breakdown.unrealized_apr == Decimal("0")
        assert breakdown.total_active_days == breakdown.realized_active_days

    def test_empty_stream_yields_zeros(self):
        breakdown = compute_apr_breakdown([], unclaimed_fees=0, now=T0)
        assert breakdown.total_apr == Decimal("0")
        assert breakdown.total_active_days == 0
        assert breakdown.calculated_at == T0

    def test_negative_unclaimed_fees_raise(self):
        with pytest.raises(InvalidArgumentError):
            compute_apr_breakdown(_events(), unclaimed_fees=-1, now=T0)


def test_zero_length_period_is_excluded_from_aggregate():
    events = [
        _event(EventType.CREATE, 0, 1, 1000),
        _event(EventType.INCREASE, 0, 2, 2000),
        _event(EventType.COLLECT, 10, 3, 2000, fee=100),
    ]
    realized = calculate_realized_apr(events)

    assert realized.periods[0].period_apr is None
    assert realized.periods[0].allocated_fees == 0
    assert realized.periods[1].allocated_fees == 100
    assert realized.time_weighted_cost_basis == 2000
    assert realized.total_active_days == 10
