from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from lp_positions.api.deps import get_pnl_curve_use_case, get_position_valuation_use_case
from lp_positions.api.mappers.snapshot_mapper import map_pool_request, map_position_request
from lp_positions.api.schemas.position_valuation import (
    PnlCurveRequest,
    PnlCurveResponse,
    PnlPointResponse,
    PositionValuationRequest,
    PositionValuationResponse,
)
from lp_positions.application.dto.pnl_curve import GetPnlCurveInput
from lp_positions.application.dto.position_valuation import GetPositionValuationInput
from lp_positions.application.use_cases.get_pnl_curve import GetPnlCurveUseCase
from lp_positions.application.use_cases.get_position_valuation import GetPositionValuationUseCase
from lp_positions.domain.exceptions import InvalidArgumentError, PoolPriceNotFoundError
from lp_positions.domain.services.fixed_point import parse_uint

router = APIRouter()
logger = logging.getLogger(__name__)


def _optional_uint(value: str | None, field_name: str) -> int | None:
    return parse_uint(value, field_name=field_name) if value is not None else None


@router.post("/v1/positions/valuation", response_model=PositionValuationResponse)
def get_position_valuation(
    req: PositionValuationRequest,
    use_case: GetPositionValuationUseCase = Depends(get_position_valuation_use_case),
):
    try:
        result = use_case.execute(
            GetPositionValuationInput(
                pool=map_pool_request(req.pool),
                position=map_position_request(req.position),
            )
        )
    except PoolPriceNotFoundError as exc:
        logger.warning("position_valuation_router: pool_price_not_found detail=%s", exc)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidArgumentError as exc:
        logger.warning(
            "position_valuation_router: invalid_input tick_lower=%s tick_upper=%s detail=%s",
            req.position.tick_lower,
            req.position.tick_upper,
            exc,
        )
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return PositionValuationResponse(
        current_tick=result.current_tick,
        current_price=str(result.current_price),
        phase=result.phase.value,
        range_status=result.range_status.value,
        token0_amount=str(result.token0_amount),
        token1_amount=str(result.token1_amount),
        position_value=str(result.position_value),
        base_token_address=result.base_token_address,
        quote_token_address=result.quote_token_address,
        lower_price=str(result.lower_price),
        upper_price=str(result.upper_price),
        warnings=result.warnings,
    )


@router.post("/v1/positions/pnl-curve", response_model=PnlCurveResponse)
def get_pnl_curve(
    req: PnlCurveRequest,
    use_case: GetPnlCurveUseCase = Depends(get_pnl_curve_use_case),
):
    try:
        result = use_case.execute(
            GetPnlCurveInput(
                pool=map_pool_request(req.pool),
                position=map_position_request(req.position),
                initial_value=parse_uint(req.initial_value, field_name="initial_value"),
                price_min=_optional_uint(req.price_min, "price_min"),
                price_max=_optional_uint(req.price_max, "price_max"),
                num_points=req.num_points,
            )
        )
    except PoolPriceNotFoundError as exc:
        logger.warning("pnl_curve_router: pool_price_not_found detail=%s", exc)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidArgumentError as exc:
        logger.warning(
            "pnl_curve_router: invalid_input price_min=%s price_max=%s num_points=%s detail=%s",
            req.price_min,
            req.price_max,
            req.num_points,
            exc,
        )
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    curve = result.curve
    return PnlCurveResponse(
        current_tick=result.current_tick,
        current_price=str(curve.current_price),
        lower_price=str(curve.lower_price),
        upper_price=str(curve.upper_price),
        price_min=str(curve.price_min),
        price_max=str(curve.price_max),
        pnl_min=str(curve.pnl_min),
        pnl_max=str(curve.pnl_max),
        current_price_index=curve.current_price_index,
        lower_index=curve.lower_index,
        upper_index=curve.upper_index,
        points=[
            PnlPointResponse(
                price=str(point.price),
                position_value=str(point.position_value),
                pnl=str(point.pnl),
                pnl_percent=point.pnl_percent,
                phase=point.phase.value,
            )
            for point in curve.points
        ],
    )
