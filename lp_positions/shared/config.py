from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: str) -> bool:
    value = (_env(name, default) or "").strip().lower()
    return value in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    log_level: str
    pnl_curve_points: int
    curve_data_points: int
    curve_buffer_divisor: int
    apr_days_per_year: Decimal
    apr_cache_enabled: bool


def get_settings() -> Settings:
    return Settings(
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        pnl_curve_points=int(_env("PNL_CURVE_POINTS", "150")),
        curve_data_points=int(_env("CURVE_DATA_POINTS", "25")),
        curve_buffer_divisor=int(_env("CURVE_BUFFER_DIVISOR", "5")),
        apr_days_per_year=Decimal(_env("APR_DAYS_PER_YEAR", "365")),
        apr_cache_enabled=_bool("APR_CACHE_ENABLED", "true"),
    )
