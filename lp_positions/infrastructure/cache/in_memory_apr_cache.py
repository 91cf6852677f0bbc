from __future__ import annotations

from dataclasses import replace
from threading import Lock

from lp_positions.application.dto.position_apr import PositionAprCacheEntry


class InMemoryAprPeriodCache:
    def __init__(self) -> None:
        self._entries: dict[str, PositionAprCacheEntry] = {}
        self._lock = Lock()

    def get(self, *, position_key: str) -> PositionAprCacheEntry | None:
        with self._lock:
            return self._entries.get(position_key)

    def save(self, *, position_key: str, entry: PositionAprCacheEntry) -> None:
        with self._lock:
            self._entries[position_key] = entry

    def invalidate(self, *, position_key: str) -> bool:
        with self._lock:
            cached = self._entries.get(position_key)
            if cached is None:
                return False
            self._entries[position_key] = replace(cached, stale=True)
            return True

    def delete(self, *, position_key: str) -> bool:
        with self._lock:
            return self._entries.pop(position_key, None) is not None
