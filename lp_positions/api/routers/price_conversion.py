from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from lp_positions.api.deps import get_convert_price_use_case
from lp_positions.api.schemas.price_conversion import ConvertPriceRequest, ConvertPriceResponse
from lp_positions.application.dto.price_conversion import ConvertPriceInput
from lp_positions.application.use_cases.convert_price import ConvertPriceUseCase
from lp_positions.domain.exceptions import InvalidArgumentError
from lp_positions.domain.services.fixed_point import parse_uint

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/v1/price/convert", response_model=ConvertPriceResponse)
def convert_price(
    req: ConvertPriceRequest,
    use_case: ConvertPriceUseCase = Depends(get_convert_price_use_case),
):
    try:
        result = use_case.execute(
            ConvertPriceInput(
                base_token_address=req.base_token_address,
                quote_token_address=req.quote_token_address,
                base_token_decimals=req.base_token_decimals,
                tick_spacing=req.tick_spacing,
                price=parse_uint(req.price, field_name="price") if req.price is not None else None,
                tick=req.tick,
            )
        )
    except InvalidArgumentError as exc:
        logger.warning(
            "price_conversion_router: invalid_input base=%s quote=%s price=%s tick=%s detail=%s",
            req.base_token_address,
            req.quote_token_address,
            req.price,
            req.tick,
            exc,
        )
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if result.price == 0:
        logger.warning(
            "price_conversion_router: price_underflow tick=%s base_decimals=%s",
            result.tick,
            req.base_token_decimals,
        )

    return ConvertPriceResponse(
        base_is_token0=result.base_is_token0,
        sqrt_ratio=str(result.sqrt_ratio),
        tick=result.tick,
        usable_tick=result.usable_tick,
        closest_usable_tick=result.closest_usable_tick,
        price=str(result.price),
        usable_tick_price=str(result.usable_tick_price),
    )
