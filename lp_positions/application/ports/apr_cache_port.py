from __future__ import annotations

from typing import Protocol

from lp_positions.application.dto.position_apr import PositionAprCacheEntry


class AprPeriodCachePort(Protocol):
    def get(self, *, position_key: str) -> PositionAprCacheEntry | None:
        ...

    def save(self, *, position_key: str, entry: PositionAprCacheEntry) -> None:
        ...

    def invalidate(self, *, position_key: str) -> bool:
        ...

    def delete(self, *, position_key: str) -> bool:
        ...
