from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from lp_positions.api.deps import get_position_pnl_use_case
from lp_positions.api.mappers.snapshot_mapper import (
    map_event_requests,
    map_pool_request,
    map_position_request,
)
from lp_positions.api.schemas.position_pnl import (
    PositionCostBasisResponse,
    PositionEventSummaryResponse,
    PositionEventValidationResponse,
    PositionPnlBreakdownResponse,
    PositionPnlRequest,
    PositionPnlResponse,
)
from lp_positions.application.dto.position_pnl import GetPositionPnlInput
from lp_positions.application.use_cases.get_position_pnl import GetPositionPnlUseCase
from lp_positions.domain.exceptions import InvalidArgumentError, NotFoundError
from lp_positions.domain.services.fixed_point import parse_uint

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/v1/positions/pnl", response_model=PositionPnlResponse)
def get_position_pnl(
    req: PositionPnlRequest,
    use_case: GetPositionPnlUseCase = Depends(get_position_pnl_use_case),
):
    try:
        result = use_case.execute(
            GetPositionPnlInput(
                pool=map_pool_request(req.pool),
                position=map_position_request(req.position),
                events=map_event_requests(req.events),
                unclaimed_fees=parse_uint(req.unclaimed_fees, field_name="unclaimed_fees"),
            )
        )
    except NotFoundError as exc:
        logger.warning("position_pnl_router: not_found events=%s detail=%s", len(req.events), exc)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidArgumentError as exc:
        logger.warning("position_pnl_router: invalid_input events=%s detail=%s", len(req.events), exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    pnl = result.pnl
    summary = result.summary
    return PositionPnlResponse(
        pnl=PositionPnlBreakdownResponse(
            invested=str(pnl.invested),
            withdrawn=str(pnl.withdrawn),
            collected_fees=str(pnl.collected_fees),
            unclaimed_fees=str(pnl.unclaimed_fees),
            total_fee_income=str(pnl.total_fee_income),
            current_value=str(pnl.current_value),
            cost_basis=str(pnl.cost_basis),
            realized_pnl=str(pnl.realized_pnl),
            unrealized_pnl=str(pnl.unrealized_pnl),
            total_pnl=str(pnl.total_pnl),
            roi=pnl.roi,
            realized_roi=pnl.realized_roi,
            confidence=pnl.confidence.value,
        ),
        cost_basis=PositionCostBasisResponse(
            invested=str(result.cost_basis.invested),
            withdrawn=str(result.cost_basis.withdrawn),
            cost_basis=str(result.cost_basis.cost_basis),
            average_entry_price=str(result.cost_basis.average_entry_price),
        ),
        summary=PositionEventSummaryResponse(
            event_count=summary.event_count,
            counts_by_type={event_type.value: count for event_type, count in summary.counts_by_type.items()},
            first_event_at=summary.first_event_at.isoformat(),
            last_event_at=summary.last_event_at.isoformat(),
            total_value_flow=str(summary.total_value_flow),
            total_fees=str(summary.total_fees),
        ),
        validation=PositionEventValidationResponse(
            is_valid=result.validation.is_valid,
            issues=result.validation.issues,
        ),
    )
