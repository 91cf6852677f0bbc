from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from lp_positions.api.deps import get_invalidate_position_apr_use_case, get_position_apr_use_case
from lp_positions.api.mappers.snapshot_mapper import map_event_requests
from lp_positions.api.schemas.position_apr import (
    AprBreakdownResponse,
    CapitalPeriodResponse,
    InvalidatePositionAprResponse,
    PositionAprRequest,
    PositionAprResponse,
)
from lp_positions.application.dto.position_apr import GetPositionAprInput, InvalidatePositionAprInput
from lp_positions.application.use_cases.get_position_apr import (
    GetPositionAprUseCase,
    InvalidatePositionAprUseCase,
)
from lp_positions.domain.exceptions import InvalidArgumentError, NotFoundError
from lp_positions.domain.services.fixed_point import parse_uint

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/v1/positions/apr", response_model=PositionAprResponse)
def get_position_apr(
    req: PositionAprRequest,
    use_case: GetPositionAprUseCase = Depends(get_position_apr_use_case),
):
    try:
        result = use_case.execute(
            GetPositionAprInput(
                position_key=req.position_key,
                events=map_event_requests(req.events),
                unclaimed_fees=parse_uint(req.unclaimed_fees, field_name="unclaimed_fees"),
            )
        )
    except NotFoundError as exc:
        logger.warning("position_apr_router: not_found position=%s detail=%s", req.position_key, exc)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidArgumentError as exc:
        logger.warning("position_apr_router: invalid_input position=%s detail=%s", req.position_key, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    breakdown = result.breakdown
    return PositionAprResponse(
        position_key=result.position_key,
        cache_status=result.cache_status,
        breakdown=AprBreakdownResponse(
            realized_apr=breakdown.realized_apr,
            realized_fees_collected=str(breakdown.realized_fees_collected),
            realized_tw_cost_basis=str(breakdown.realized_tw_cost_basis),
            realized_active_days=breakdown.realized_active_days,
            unrealized_apr=breakdown.unrealized_apr,
            unrealized_fees_unclaimed=str(breakdown.unrealized_fees_unclaimed),
            unrealized_cost_basis=str(breakdown.unrealized_cost_basis),
            unrealized_active_days=breakdown.unrealized_active_days,
            total_apr=breakdown.total_apr,
            total_active_days=breakdown.total_active_days,
            total_tw_cost_basis=str(breakdown.total_tw_cost_basis),
            calculated_at=breakdown.calculated_at.isoformat(),
        ),
        periods=[
            CapitalPeriodResponse(
                event_id=period.event_id,
                start=period.start.isoformat(),
                end=period.end.isoformat() if period.end is not None else None,
                days=period.days,
                cost_basis=str(period.cost_basis),
                allocated_fees=str(period.allocated_fees),
                period_apr=period.period_apr,
            )
            for period in result.realized.periods
        ],
    )


@router.delete("/v1/positions/{position_key}/apr", response_model=InvalidatePositionAprResponse)
def invalidate_position_apr(
    position_key: str,
    delete: bool = False,
    use_case: InvalidatePositionAprUseCase = Depends(get_invalidate_position_apr_use_case),
):
    found = use_case.execute(InvalidatePositionAprInput(position_key=position_key, delete=delete))
    return InvalidatePositionAprResponse(position_key=position_key, found=found)
