from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lp_positions.api.routers.position_apr import router as position_apr_router
from lp_positions.api.routers.position_pnl import router as position_pnl_router
from lp_positions.api.routers.position_valuation import router as position_valuation_router
from lp_positions.api.routers.price_conversion import router as price_conversion_router
from lp_positions.shared.config import get_settings

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="LP Positions API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(price_conversion_router)
app.include_router(position_valuation_router)
app.include_router(position_pnl_router)
app.include_router(position_apr_router)
