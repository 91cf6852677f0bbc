from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class EventType(str, Enum):
    CREATE = "CREATE"
    INCREASE = "INCREASE"
    DECREASE = "DECREASE"
    COLLECT = "COLLECT"
    CLOSE = "CLOSE"


class Confidence(str, Enum):
    EXACT = "exact"
    ESTIMATED = "estimated"


INVESTMENT_EVENT_TYPES = frozenset({EventType.CREATE, EventType.INCREASE})
WITHDRAWAL_EVENT_TYPES = frozenset({EventType.DECREASE, EventType.CLOSE})


@dataclass(frozen=True)
class PositionEvent:
    event_type: EventType
    timestamp: datetime
    liquidity_delta: int
    value_in_quote: int
    cost_basis_after: int
    fee_value_in_quote: int | None = None
    confidence: Confidence = Confidence.EXACT
    block_number: int = 0
    transaction_index: int = 0
    log_index: int = 0
    event_id: str | None = None

    @property
    def ordering_key(self) -> tuple[int, int, int]:
        return (self.block_number, self.transaction_index, self.log_index)

    @property
    def fee_value(self) -> int:
        return self.fee_value_in_quote or 0
