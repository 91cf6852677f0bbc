from __future__ import annotations

from lp_positions.application.dto.position_pnl import GetPositionPnlInput, GetPositionPnlOutput
from lp_positions.application.dto.position_valuation import GetPositionValuationInput
from lp_positions.application.use_cases.get_position_valuation import GetPositionValuationUseCase
from lp_positions.domain.exceptions import PositionEventsNotFoundError
from lp_positions.domain.services.event_pnl import (
    compute_cost_basis_summary,
    compute_event_pnl,
    summarize_events,
    validate_events,
)


class GetPositionPnlUseCase:
    def __init__(self, *, valuation_use_case: GetPositionValuationUseCase):
        self._valuation_use_case = valuation_use_case

    def execute(self, command: GetPositionPnlInput) -> GetPositionPnlOutput:
        if not command.events:
            raise PositionEventsNotFoundError("No events found for position.")

        valuation = self._valuation_use_case.execute(
            GetPositionValuationInput(pool=command.pool, position=command.position)
        )
        current_value = valuation.position_value

        return GetPositionPnlOutput(
            current_value=current_value,
            pnl=compute_event_pnl(
                command.events,
                current_value=current_value,
                unclaimed_fees=command.unclaimed_fees,
            ),
            cost_basis=compute_cost_basis_summary(command.events, current_value=current_value),
            summary=summarize_events(command.events),
            validation=validate_events(command.events),
        )
