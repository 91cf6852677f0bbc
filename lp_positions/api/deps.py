from __future__ import annotations

from functools import lru_cache

from lp_positions.application.use_cases.convert_price import ConvertPriceUseCase
from lp_positions.application.use_cases.get_pnl_curve import GetPnlCurveUseCase
from lp_positions.application.use_cases.get_position_apr import (
    GetPositionAprUseCase,
    InvalidatePositionAprUseCase,
)
from lp_positions.application.use_cases.get_position_pnl import GetPositionPnlUseCase
from lp_positions.application.use_cases.get_position_valuation import GetPositionValuationUseCase
from lp_positions.infrastructure.cache.in_memory_apr_cache import InMemoryAprPeriodCache
from lp_positions.infrastructure.clock import SystemClock
from lp_positions.shared.config import get_settings


@lru_cache(maxsize=1)
def get_apr_period_cache() -> InMemoryAprPeriodCache:
    return InMemoryAprPeriodCache()


@lru_cache(maxsize=1)
def get_clock() -> SystemClock:
    return SystemClock()


def get_convert_price_use_case() -> ConvertPriceUseCase:
    return ConvertPriceUseCase()


def get_position_valuation_use_case() -> GetPositionValuationUseCase:
    return GetPositionValuationUseCase()


def get_pnl_curve_use_case() -> GetPnlCurveUseCase:
    settings = get_settings()
    return GetPnlCurveUseCase(
        pnl_curve_points=settings.pnl_curve_points,
        curve_data_points=settings.curve_data_points,
        buffer_divisor=settings.curve_buffer_divisor,
    )


def get_position_pnl_use_case() -> GetPositionPnlUseCase:
    return GetPositionPnlUseCase(valuation_use_case=get_position_valuation_use_case())


def get_position_apr_use_case() -> GetPositionAprUseCase:
    settings = get_settings()
    return GetPositionAprUseCase(
        apr_cache_port=get_apr_period_cache(),
        clock_port=get_clock(),
        days_per_year=settings.apr_days_per_year,
        cache_enabled=settings.apr_cache_enabled,
    )


def get_invalidate_position_apr_use_case() -> InvalidatePositionAprUseCase:
    return InvalidatePositionAprUseCase(apr_cache_port=get_apr_period_cache())
