from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from lp_positions.domain.entities.position_event import Confidence, EventType, PositionEvent
from lp_positions.domain.exceptions import PositionEventsNotFoundError
from lp_positions.domain.services.event_pnl import (
    InvestmentFlows,
    calculate_cost_basis,
    compute_cost_basis_summary,
    compute_event_pnl,
    order_events,
    summarize_events,
    validate_events,
)


T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _event(event_type: EventType, block: int, **kwargs) -> PositionEvent:
    defaults = {
        "timestamp": T0 + timedelta(days=block),
        "liquidity_delta": 0,
        "value_in_quote": 0,
        "cost_basis_after": 0,
    }
    defaults.update(kwargs)
    return PositionEvent(event_type=event_type, block_number=block, **defaults)


def _scenario_events() -> list[PositionEvent]:
    return [
        _event(EventType.CREATE, 1, liquidity_delta=1000, value_in_quote=1000, cost_basis_after=1000),
        _event(EventType.DECREASE, 2, liquidity_delta=-300, value_in_quote=300, cost_basis_after=700),
        _event(EventType.COLLECT, 3, fee_value_in_quote=100, cost_basis_after=700),
    ]


class TestEventPnl:
    def test_partial_withdrawal_scenario(self):
        pnl = compute_event_pnl(_scenario_events(), current_value=800, unclaimed_fees=50)

        assert pnl.invested == 1000
        assert pnl.withdrawn == 300
        assert pnl.collected_fees == 100
        assert pnl.cost_basis == 728
        assert pnl.withdrawn_cost_basis == 272
        assert pnl.realized_pnl == 128
        assert pnl.unrealized_pnl == 800 - 728 + 50
        assert pnl.total_pnl == 128 + 122
        assert pnl.total_fee_income == 150
        assert pnl.roi == Decimal("25")
        assert pnl.realized_roi == Decimal("12.8")
        assert pnl.confidence is Confidence.EXACT
        assert pnl.event_count == 3

    def test_events_are_ordered_by_chain_position(self):
        events = list(reversed(_scenario_events()))
        ordered = order_events(events)
        assert [event.block_number for event in ordered] == [1, 2, 3]

    def test_same_block_orders_by_log_index(self):
        first = _event(EventType.CREATE, 5, log_index=1)
        second = _event(EventType.COLLECT, 5, log_index=7)
        assert order_events([second, first]) == [first, second]

    def test_estimated_event_taints_confidence(self):
        events = _scenario_events()
        events.append(_event(EventType.COLLECT, 4, fee_value_in_quote=1, confidence=Confidence.ESTIMATED))
        pnl = compute_event_pnl(events, current_value=800, unclaimed_fees=0)
        assert pnl.confidence is Confidence.ESTIMATED

    def test_no_withdrawals_keeps_full_cost_basis(self):
        events = [_event(EventType.CREATE, 1, value_in_quote=1000, cost_basis_after=1000)]
        pnl = compute_event_pnl(events, current_value=900, unclaimed_fees=0)
        assert pnl.cost_basis == 1000
        assert pnl.realized_pnl == 0
        assert pnl.unrealized_pnl == -100
        assert pnl.roi == Decimal("-10")

    def test_empty_stream_raises(self):
        with pytest.raises(PositionEventsNotFoundError):
            compute_event_pnl([], current_value=0, unclaimed_fees=0)

    def test_cost_basis_edge_cases(self):
        assert calculate_cost_basis(InvestmentFlows(invested=0, withdrawn=10), 5) == 0
        assert calculate_cost_basis(InvestmentFlows(invested=100, withdrawn=0), 5) == 100
        assert calculate_cost_basis(InvestmentFlows(invested=100, withdrawn=100), 0) == 0


class TestEventSummaries:
    def test_cost_basis_summary(self):
        summary = compute_cost_basis_summary(_scenario_events(), current_value=800)
        assert summary.invested == 1000
        assert summary.withdrawn == 300
        assert summary.cost_basis == 728
        assert summary.average_entry_price == 666666666666666666

    def test_summarize_events(self):
        summary = summarize_events(_scenario_events())
        assert summary.event_count == 3
        assert summary.counts_by_type == {
            EventType.CREATE: 1,
            EventType.DECREASE: 1,
            EventType.COLLECT: 1,
        }
        assert summary.first_event_at == T0 + timedelta(days=1)
        assert summary.last_event_at == T0 + timedelta(days=3)
        assert summary.total_value_flow == 1300
        assert summary.total_fees == 100

    def test_validation_flags_missing_create_and_negative_liquidity(self):
        events = [
            _event(EventType.INCREASE, 1, liquidity_delta=100, value_in_quote=10),
            _event(EventType.DECREASE, 2, liquidity_delta=-200, value_in_quote=20, event_id="0xabc-3"),
        ]
        validation = validate_events(events)
        assert validation.is_valid is False
        assert validation.event_count == 2
        assert any("Missing CREATE" in issue for issue in validation.issues)
        assert any("0xabc-3" in issue for issue in validation.issues)

    def test_validation_warnings_keep_stream_valid(self):
        events = [
            _event(EventType.CREATE, 1, liquidity_delta=100, value_in_quote=0),
            _event(EventType.COLLECT, 2),
        ]
        validation = validate_events(events)
        assert validation.is_valid is True
        assert "1 events have zero value." in validation.issues
        assert "1 COLLECT events have no fee value." in validation.issues
