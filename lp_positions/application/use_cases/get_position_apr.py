from __future__ import annotations

import hashlib
import logging
from decimal import Decimal

from lp_positions.application.dto.position_apr import (
    GetPositionAprInput,
    GetPositionAprOutput,
    InvalidatePositionAprInput,
    PositionAprCacheEntry,
)
from lp_positions.application.ports.apr_cache_port import AprPeriodCachePort
from lp_positions.application.ports.clock_port import ClockPort
from lp_positions.domain.entities.apr import RealizedApr
from lp_positions.domain.entities.position_event import PositionEvent
from lp_positions.domain.exceptions import InvalidArgumentError, PositionEventsNotFoundError
from lp_positions.domain.services.event_pnl import order_events
from lp_positions.domain.services.period_apr import (
    DEFAULT_DAYS_PER_YEAR,
    aggregate_realized_apr,
    apply_event_to_periods,
    calculate_realized_apr,
    compute_apr_breakdown,
)


logger = logging.getLogger(__name__)

CACHE_HIT = "hit"
CACHE_INCREMENTAL = "incremental"
CACHE_RECOMPUTED = "recomputed"


def events_fingerprint(events: list[PositionEvent]) -> str:
    digest = hashlib.sha256()
    for event in events:
        digest.update(
            (
                f"{event.ordering_key}|{event.event_type.value}|{event.timestamp.isoformat()}|"
                f"{event.liquidity_delta}|{event.value_in_quote}|{event.fee_value_in_quote}|"
                f"{event.cost_basis_after};"
            ).encode()
        )
    return digest.hexdigest()


class GetPositionAprUseCase:
    def __init__(
        self,
        *,
        apr_cache_port: AprPeriodCachePort,
        clock_port: ClockPort,
        days_per_year: Decimal = DEFAULT_DAYS_PER_YEAR,
        cache_enabled: bool = True,
    ):
        self._apr_cache_port = apr_cache_port
        self._clock_port = clock_port
        self._days_per_year = days_per_year
        self._cache_enabled = cache_enabled

    def execute(self, command: GetPositionAprInput) -> GetPositionAprOutput:
        if not command.events:
            raise PositionEventsNotFoundError("No events found for position.")
        if command.unclaimed_fees < 0:
            raise InvalidArgumentError("unclaimed_fees must be non-negative.")

        ordered = order_events(command.events)
        fingerprint = events_fingerprint(ordered)
        realized, status = self._resolve_realized(command.position_key, ordered, fingerprint)

        if self._cache_enabled and status != CACHE_HIT:
            self._apr_cache_port.save(
                position_key=command.position_key,
                entry=PositionAprCacheEntry(
                    event_count=len(ordered),
                    fingerprint=fingerprint,
                    realized=realized,
                ),
            )

        breakdown = compute_apr_breakdown(
            ordered,
            unclaimed_fees=command.unclaimed_fees,
            now=self._clock_port.now(),
            realized=realized,
            days_per_year=self._days_per_year,
        )
        logger.info(
            "get_position_apr: position=%s events=%s cache=%s total_apr=%s",
            command.position_key,
            len(ordered),
            status,
            breakdown.total_apr,
        )
        return GetPositionAprOutput(
            position_key=command.position_key,
            realized=realized,
            breakdown=breakdown,
            cache_status=status,
        )

    def _resolve_realized(
        self,
        position_key: str,
        ordered: list[PositionEvent],
        fingerprint: str,
    ) -> tuple[RealizedApr, str]:
        cached = self._apr_cache_port.get(position_key=position_key) if self._cache_enabled else None
        if cached is not None and not cached.stale:
            if cached.event_count == len(ordered) and cached.fingerprint == fingerprint:
                return cached.realized, CACHE_HIT
            if self._can_extend(cached, ordered):
                periods = cached.realized.periods
                for event in ordered[cached.event_count:]:
                    periods = apply_event_to_periods(periods, event, days_per_year=self._days_per_year)
                realized = aggregate_realized_apr(periods, days_per_year=self._days_per_year)
                return realized, CACHE_INCREMENTAL

        realized = calculate_realized_apr(ordered, days_per_year=self._days_per_year)
        return realized, CACHE_RECOMPUTED

    @staticmethod
    def _can_extend(cached: PositionAprCacheEntry, ordered: list[PositionEvent]) -> bool:
        if not 0 < cached.event_count < len(ordered):
            return False
        if events_fingerprint(ordered[: cached.event_count]) != cached.fingerprint:
            return False
        latest = max(period.start for period in cached.realized.periods)
        for event in ordered[cached.event_count:]:
            if event.timestamp < latest:
                return False
            latest = event.timestamp
        return True


class InvalidatePositionAprUseCase:
    def __init__(self, *, apr_cache_port: AprPeriodCachePort):
        self._apr_cache_port = apr_cache_port

    def execute(self, command: InvalidatePositionAprInput) -> bool:
        if command.delete:
            removed = self._apr_cache_port.delete(position_key=command.position_key)
        else:
            removed = self._apr_cache_port.invalidate(position_key=command.position_key)
        logger.info(
            "invalidate_position_apr: position=%s delete=%s found=%s",
            command.position_key,
            command.delete,
            removed,
        )
        return removed
