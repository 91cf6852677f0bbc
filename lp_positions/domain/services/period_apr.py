from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

from lp_positions.domain.entities.apr import AprBreakdown, CapitalPeriod, RealizedApr
from lp_positions.domain.entities.position_event import EventType, PositionEvent
from lp_positions.domain.exceptions import InvalidArgumentError
from lp_positions.domain.services.event_pnl import order_events


logger = logging.getLogger(__name__)

DEFAULT_DAYS_PER_YEAR = Decimal("365")
MICROSECONDS_PER_DAY = 86_400 * 1_000_000


def elapsed_microseconds(start: datetime, end: datetime) -> int:
    delta = end - start
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


def days_between(start: datetime, end: datetime) -> Decimal:
    return Decimal(elapsed_microseconds(start, end)) / Decimal(MICROSECONDS_PER_DAY)


def annualized_apr(
    fees: int,
    cost_basis: int,
    days: Decimal,
    *,
    days_per_year: Decimal = DEFAULT_DAYS_PER_YEAR,
) -> Decimal:
    if fees == 0 or cost_basis <= 0 or days <= 0:
        return Decimal("0")
    return (Decimal(fees) / Decimal(cost_basis)) / (days / days_per_year) * Decimal(100)


def _is_active(period: CapitalPeriod) -> bool:
    return period.is_closed and period.days > 0 and period.cost_basis > 0


def build_capital_periods(events: list[PositionEvent]) -> list[CapitalPeriod]:
    ordered = order_events(events)
    periods: list[CapitalPeriod] = []
    for index, event in enumerate(ordered):
        end = ordered[index + 1].timestamp if index + 1 < len(ordered) else None
        periods.append(
            CapitalPeriod(
                event_index=index,
                start=event.timestamp,
                end=end,
                days=days_between(event.timestamp, end) if end is not None else None,
                cost_basis=event.cost_basis_after,
                event_id=event.event_id,
            )
        )
    return periods


def distribute_collect_fees(
    periods: list[CapitalPeriod],
    *,
    collected_at: datetime,
    fee_value: int,
) -> list[CapitalPeriod]:
    """Rateia uma coleta entre os periodos fechados anteriores a ela.

    Peso = custo do periodo x duracao; cada periodo recebe
    floor(fee * peso / peso_total).
    """
    if fee_value <= 0:
        return list(periods)

    weights: dict[int, int] = {}
    for position, period in enumerate(periods):
        if not period.is_closed or period.cost_basis == 0 or period.start >= collected_at:
            continue
        weights[position] = period.cost_basis * max(elapsed_microseconds(period.start, period.end), 0)

    total_weight = sum(weights.values())
    if total_weight <= 0:
        logger.debug(
            "period_apr: skip_distribution collected_at=%s fee=%s eligible=%s",
            collected_at.isoformat(),
            fee_value,
            len(weights),
        )
        return list(periods)

    distributed = list(periods)
    for position, weight in weights.items():
        period = distributed[position]
        distributed[position] = replace(
            period,
            allocated_fees=period.allocated_fees + (fee_value * weight) // total_weight,
        )
    return distributed


def distribute_all_fees(
    periods: list[CapitalPeriod],
    events: list[PositionEvent],
) -> list[CapitalPeriod]:
    distributed = [replace(period, allocated_fees=0) for period in periods]
    for event in order_events(events):
        if event.event_type is not EventType.COLLECT or event.fee_value <= 0:
            continue
        distributed = distribute_collect_fees(
            distributed,
            collected_at=event.timestamp,
            fee_value=event.fee_value,
        )
    return distributed


def compute_period_aprs(
    periods: list[CapitalPeriod],
    *,
    days_per_year: Decimal = DEFAULT_DAYS_PER_YEAR,
) -> list[CapitalPeriod]:
    computed: list[CapitalPeriod] = []
    for period in periods:
        apr = None
        if _is_active(period):
            apr = annualized_apr(
                period.allocated_fees,
                period.cost_basis,
                period.days,
                days_per_year=days_per_year,
            )
        computed.append(replace(period, period_apr=apr))
    return computed


def aggregate_realized_apr(
    periods: list[CapitalPeriod],
    *,
    days_per_year: Decimal = DEFAULT_DAYS_PER_YEAR,
) -> RealizedApr:
    active = [period for period in periods if _is_active(period)]
    if not active:
        return RealizedApr(
            total_apr=Decimal("0"),
            time_weighted_cost_basis=0,
            total_fees_collected=0,
            total_active_days=0,
            periods=list(periods),
        )

    total_elapsed = sum(elapsed_microseconds(period.start, period.end) for period in active)
    weighted_cost_basis = sum(
        period.cost_basis * elapsed_microseconds(period.start, period.end) for period in active
    )
    total_fees = sum(period.allocated_fees for period in active)
    total_days = Decimal(total_elapsed) / Decimal(MICROSECONDS_PER_DAY)
    time_weighted_cost_basis = weighted_cost_basis // total_elapsed if total_elapsed > 0 else 0

    return RealizedApr(
        total_apr=annualized_apr(
            total_fees,
            time_weighted_cost_basis,
            total_days,
            days_per_year=days_per_year,
        ),
        time_weighted_cost_basis=time_weighted_cost_basis,
        total_fees_collected=total_fees,
        total_active_days=int(total_days.to_integral_value(rounding=ROUND_HALF_UP)),
        periods=list(periods),
    )


def calculate_realized_apr(
    events: list[PositionEvent],
    *,
    days_per_year: Decimal = DEFAULT_DAYS_PER_YEAR,
) -> RealizedApr:
    periods = build_capital_periods(events)
    periods = distribute_all_fees(periods, events)
    periods = compute_period_aprs(periods, days_per_year=days_per_year)
    return aggregate_realized_apr(periods, days_per_year=days_per_year)


def apply_event_to_periods(
    periods: list[CapitalPeriod],
    event: PositionEvent,
    *,
    days_per_year: Decimal = DEFAULT_DAYS_PER_YEAR,
) -> list[CapitalPeriod]:
    """Atualiza os periodos com um evento novo sem recalcular o historico."""
    if periods and event.timestamp < max(period.start for period in periods):
        raise InvalidArgumentError("event is older than the latest capital period.")

    updated: list[CapitalPeriod] = []
    for period in periods:
        if period.end is None:
            period = replace(
                period,
                end=event.timestamp,
                days=days_between(period.start, event.timestamp),
            )
        updated.append(period)

    updated.append(
        CapitalPeriod(
            event_index=len(periods),
            start=event.timestamp,
            end=None,
            days=None,
            cost_basis=event.cost_basis_after,
            event_id=event.event_id,
        )
    )
    if event.event_type is EventType.COLLECT and event.fee_value > 0:
        updated = distribute_collect_fees(
            updated,
            collected_at=event.timestamp,
            fee_value=event.fee_value,
        )
    return compute_period_aprs(updated, days_per_year=days_per_year)


def compute_unrealized_apr(
    period_start: datetime,
    *,
    now: datetime,
    cost_basis: int,
    unclaimed_fees: int,
    days_per_year: Decimal = DEFAULT_DAYS_PER_YEAR,
) -> Decimal:
    days = days_between(period_start, now)
    if days <= 0 or cost_basis == 0 or unclaimed_fees == 0:
        logger.debug(
            "period_apr: unrealized_zero days=%s cost_basis=%s unclaimed=%s",
            days,
            cost_basis,
            unclaimed_fees,
        )
        return Decimal("0")
    return annualized_apr(unclaimed_fees, cost_basis, days, days_per_year=days_per_year)


def _empty_breakdown(now: datetime) -> AprBreakdown:
    return AprBreakdown(
        realized_apr=Decimal("0"),
        realized_fees_collected=0,
        realized_tw_cost_basis=0,
        realized_active_days=0,
        unrealized_apr=Decimal("0"),
        unrealized_fees_unclaimed=0,
        unrealized_cost_basis=0,
        unrealized_active_days=0,
        total_apr=Decimal("0"),
        total_active_days=0,
        total_tw_cost_basis=0,
        calculated_at=now,
    )


def compute_apr_breakdown(
    events: list[PositionEvent],
    *,
    unclaimed_fees: int,
    now: datetime,
    realized: RealizedApr | None = None,
    days_per_year: Decimal = DEFAULT_DAYS_PER_YEAR,
) -> AprBreakdown:
    if not events:
        return _empty_breakdown(now)
    if unclaimed_fees < 0:
        raise InvalidArgumentError("unclaimed_fees must be non-negative.")

    ordered = order_events(events)
    most_recent = ordered[-1]
    collects = [event for event in ordered if event.event_type is EventType.COLLECT]
    last_collect = collects[-1] if collects else None
    period_start = (last_collect or ordered[0]).timestamp

    unrealized_cost_basis = most_recent.cost_basis_after
    unrealized_apr = compute_unrealized_apr(
        period_start,
        now=now,
        cost_basis=unrealized_cost_basis,
        unclaimed_fees=unclaimed_fees,
        days_per_year=days_per_year,
    )
    elapsed_days = int(days_between(period_start, now).to_integral_value(rounding=ROUND_FLOOR))
    unrealized_days = max(1, elapsed_days)
    if unrealized_cost_basis == 0:
        # posicao fechada nao tem periodo aberto
        unrealized_apr = Decimal("0")
        unrealized_days = 0

    if last_collect is None:
        return AprBreakdown(
            realized_apr=Decimal("0"),
            realized_fees_collected=0,
            realized_tw_cost_basis=0,
            realized_active_days=0,
            unrealized_apr=unrealized_apr,
            unrealized_fees_unclaimed=unclaimed_fees,
            unrealized_cost_basis=unrealized_cost_basis,
            unrealized_active_days=unrealized_days,
            total_apr=unrealized_apr if unrealized_days > 0 else Decimal("0"),
            total_active_days=unrealized_days,
            total_tw_cost_basis=unrealized_cost_basis,
            calculated_at=now,
        )

    if realized is None:
        realized = calculate_realized_apr(ordered, days_per_year=days_per_year)

    realized_days = realized.total_active_days
    total_days = realized_days + unrealized_days
    if total_days > 0:
        total_apr = (
            realized.total_apr * realized_days + unrealized_apr * unrealized_days
        ) / Decimal(total_days)
        total_tw_cost_basis = (
            realized.time_weighted_cost_basis * realized_days
            + unrealized_cost_basis * unrealized_days
        ) // total_days
    else:
        total_apr = Decimal("0")
        total_tw_cost_basis = realized.time_weighted_cost_basis

    return AprBreakdown(
        realized_apr=realized.total_apr,
        realized_fees_collected=realized.total_fees_collected,
        realized_tw_cost_basis=realized.time_weighted_cost_basis,
        realized_active_days=realized_days,
        unrealized_apr=unrealized_apr,
        unrealized_fees_unclaimed=unclaimed_fees,
        unrealized_cost_basis=unrealized_cost_basis,
        unrealized_active_days=unrealized_days,
        total_apr=total_apr,
        total_active_days=total_days,
        total_tw_cost_basis=total_tw_cost_basis,
        calculated_at=now,
    )
