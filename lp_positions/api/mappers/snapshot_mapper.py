from __future__ import annotations

from datetime import datetime, timezone

from lp_positions.api.schemas.common import (
    PoolSnapshotRequest,
    PositionEventRequest,
    PositionSnapshotRequest,
)
from lp_positions.domain.entities.pool import PoolSnapshot, Token
from lp_positions.domain.entities.position import PositionSnapshot
from lp_positions.domain.entities.position_event import PositionEvent
from lp_positions.domain.services.fixed_point import (
    DEFAULT_TICK_SPACING,
    parse_int,
    parse_uint,
    tick_spacing_for_fee,
)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def map_pool_request(req: PoolSnapshotRequest) -> PoolSnapshot:
    tick_spacing = req.tick_spacing
    if tick_spacing is None:
        tick_spacing = tick_spacing_for_fee(req.fee_tier) if req.fee_tier is not None else DEFAULT_TICK_SPACING
    current_sqrt_price = None
    if req.current_sqrt_price is not None:
        current_sqrt_price = parse_uint(req.current_sqrt_price, field_name="current_sqrt_price")
    return PoolSnapshot(
        token0=Token(address=req.token0.address, decimals=req.token0.decimals),
        token1=Token(address=req.token1.address, decimals=req.token1.decimals),
        tick_spacing=tick_spacing,
        current_tick=req.current_tick,
        current_sqrt_price=current_sqrt_price,
        fee_tier=req.fee_tier,
    )


def map_position_request(req: PositionSnapshotRequest) -> PositionSnapshot:
    return PositionSnapshot(
        liquidity=parse_uint(req.liquidity, field_name="liquidity"),
        tick_lower=req.tick_lower,
        tick_upper=req.tick_upper,
        quote_is_token0=req.quote_is_token0,
    )


def map_event_request(req: PositionEventRequest) -> PositionEvent:
    fee_value = None
    if req.fee_value_in_quote is not None:
        fee_value = parse_uint(req.fee_value_in_quote, field_name="fee_value_in_quote")
    return PositionEvent(
        event_type=req.event_type,
        timestamp=_as_utc(req.timestamp),
        liquidity_delta=parse_int(req.liquidity_delta, field_name="liquidity_delta"),
        value_in_quote=parse_uint(req.value_in_quote, field_name="value_in_quote"),
        fee_value_in_quote=fee_value,
        cost_basis_after=parse_uint(req.cost_basis_after, field_name="cost_basis_after"),
        confidence=req.confidence,
        block_number=req.block_number,
        transaction_index=req.transaction_index,
        log_index=req.log_index,
        event_id=req.event_id,
    )


def map_event_requests(rows: list[PositionEventRequest]) -> list[PositionEvent]:
    return [map_event_request(row) for row in rows]
