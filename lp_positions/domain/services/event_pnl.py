from __future__ import annotations

from dataclasses import dataclass

from lp_positions.domain.entities.pnl import CostBasisSummary, EventPnl, EventSummary, EventValidation
from lp_positions.domain.entities.position_event import (
    INVESTMENT_EVENT_TYPES,
    WITHDRAWAL_EVENT_TYPES,
    Confidence,
    EventType,
    PositionEvent,
)
from lp_positions.domain.exceptions import InvalidArgumentError, PositionEventsNotFoundError
from lp_positions.domain.services.fixed_point import truncated_percent


AVERAGE_ENTRY_PRICE_SCALE = 10**18


@dataclass(frozen=True)
class InvestmentFlows:
    invested: int
    withdrawn: int


def order_events(events: list[PositionEvent]) -> list[PositionEvent]:
    return sorted(events, key=lambda event: event.ordering_key)


def _require_events(events: list[PositionEvent]) -> list[PositionEvent]:
    if not events:
        raise PositionEventsNotFoundError("No events found for position.")
    return order_events(events)


def calculate_investment_flows(events: list[PositionEvent]) -> InvestmentFlows:
    invested = 0
    withdrawn = 0
    for event in events:
        if event.event_type in INVESTMENT_EVENT_TYPES:
            invested += abs(event.value_in_quote)
        elif event.event_type in WITHDRAWAL_EVENT_TYPES:
            withdrawn += abs(event.value_in_quote)
    return InvestmentFlows(invested=invested, withdrawn=withdrawn)


def calculate_collected_fees(events: list[PositionEvent]) -> int:
    return sum(event.fee_value for event in events if event.event_type is EventType.COLLECT)


def calculate_cost_basis(flows: InvestmentFlows, current_value: int) -> int:
    """Custo medio proporcional: cada retirada realiza uma fatia do investido.

    Aproximacao por custo medio, sem rastrear lotes (FIFO/LIFO).
    """
    if flows.invested == 0:
        return 0
    if flows.withdrawn == 0:
        return flows.invested
    total_value = flows.withdrawn + current_value
    if total_value == 0:
        return 0
    return flows.invested - (flows.invested * flows.withdrawn) // total_value


def _withdrawn_cost_basis(flows: InvestmentFlows, current_value: int) -> int:
    if flows.withdrawn == 0 or flows.invested == 0:
        return 0
    total_value = flows.withdrawn + current_value
    if total_value <= 0:
        return flows.invested
    return (flows.invested * flows.withdrawn) // total_value


def determine_confidence(events: list[PositionEvent]) -> Confidence:
    if any(event.confidence is Confidence.ESTIMATED for event in events):
        return Confidence.ESTIMATED
    return Confidence.EXACT


def compute_event_pnl(
    events: list[PositionEvent],
    *,
    current_value: int,
    unclaimed_fees: int,
) -> EventPnl:
    ordered = _require_events(events)
    if current_value < 0 or unclaimed_fees < 0:
        raise InvalidArgumentError("current_value and unclaimed_fees must be non-negative.")

    flows = calculate_investment_flows(ordered)
    collected = calculate_collected_fees(ordered)
    cost_basis = calculate_cost_basis(flows, current_value)
    withdrawn_cost_basis = _withdrawn_cost_basis(flows, current_value)

    realized = collected
    if flows.withdrawn > 0 and flows.invested > 0:
        realized += flows.withdrawn - withdrawn_cost_basis
    unrealized = current_value - cost_basis + unclaimed_fees
    total = realized + unrealized

    return EventPnl(
        invested=flows.invested,
        withdrawn=flows.withdrawn,
        collected_fees=collected,
        unclaimed_fees=unclaimed_fees,
        total_fee_income=collected + unclaimed_fees,
        current_value=current_value,
        cost_basis=cost_basis,
        withdrawn_cost_basis=withdrawn_cost_basis,
        realized_pnl=realized,
        unrealized_pnl=unrealized,
        total_pnl=total,
        roi=truncated_percent(total, flows.invested),
        realized_roi=truncated_percent(realized, flows.invested),
        confidence=determine_confidence(ordered),
        event_count=len(ordered),
    )


def compute_cost_basis_summary(
    events: list[PositionEvent],
    *,
    current_value: int,
) -> CostBasisSummary:
    ordered = _require_events(events)
    flows = calculate_investment_flows(ordered)
    total_tokens = flows.invested - flows.withdrawn + current_value
    average_entry_price = (
        flows.invested * AVERAGE_ENTRY_PRICE_SCALE // total_tokens if total_tokens > 0 else 0
    )
    return CostBasisSummary(
        invested=flows.invested,
        withdrawn=flows.withdrawn,
        cost_basis=calculate_cost_basis(flows, current_value),
        average_entry_price=average_entry_price,
    )


def summarize_events(events: list[PositionEvent]) -> EventSummary:
    ordered = _require_events(events)
    flows = calculate_investment_flows(ordered)
    counts: dict[EventType, int] = {}
    for event in ordered:
        counts[event.event_type] = counts.get(event.event_type, 0) + 1
    timestamps = sorted(event.timestamp for event in ordered)
    return EventSummary(
        event_count=len(ordered),
        counts_by_type=counts,
        first_event_at=timestamps[0],
        last_event_at=timestamps[-1],
        total_invested=flows.invested,
        total_withdrawn=flows.withdrawn,
        total_value_flow=sum(event.value_in_quote for event in ordered),
        total_fees=calculate_collected_fees(ordered),
    )


def validate_events(events: list[PositionEvent]) -> EventValidation:
    ordered = order_events(events)
    issues: list[str] = []
    is_valid = True

    if not ordered:
        return EventValidation(is_valid=False, issues=["No events found for position."], event_count=0)

    if not any(event.event_type is EventType.CREATE for event in ordered):
        issues.append("Missing CREATE event; the first INCREASE should be marked as CREATE.")

    running_liquidity = 0
    for index, event in enumerate(ordered):
        running_liquidity += event.liquidity_delta
        if running_liquidity < 0:
            label = event.event_id or f"#{index}"
            issues.append(f"Negative liquidity detected at event {label}.")
            is_valid = False

    zero_value = [
        event
        for event in ordered
        if event.value_in_quote == 0 and event.event_type is not EventType.COLLECT
    ]
    if zero_value:
        issues.append(f"{len(zero_value)} events have zero value.")

    missing_fees = [
        event
        for event in ordered
        if event.event_type is EventType.COLLECT and event.fee_value_in_quote is None
    ]
    if missing_fees:
        issues.append(f"{len(missing_fees)} COLLECT events have no fee value.")

    return EventValidation(is_valid=is_valid, issues=issues, event_count=len(ordered))
