from __future__ import annotations

from lp_pnl.application.dto.positions import PositionPnlOutput, PositionQueryInput
from lp_pnl.application.ports.positions_port import PositionsPort
from lp_pnl.application.use_cases.position_common import Clock, evaluate_position, utc_now
from lp_pnl.domain.services.fee_estimation import FeeEstimator
from lp_pnl.domain.services.range_metrics import is_in_range


class GetPositionPnlUseCase:
    def __init__(
        self,
        *,
        positions_port: PositionsPort,
        fee_estimator: FeeEstimator,
        swap_lookback_hours: int = 24,
        clock: Clock = utc_now,
    ):
        self._positions_port = positions_port
        self._fee_estimator = fee_estimator
        self._swap_lookback_hours = swap_lookback_hours
        self._clock = clock

    def execute(self, command: PositionQueryInput) -> PositionPnlOutput:
        valuation = evaluate_position(
            positions_port=self._positions_port,
            fee_estimator=self._fee_estimator,
            swap_lookback_hours=self._swap_lookback_hours,
            now=self._clock(),
            command=command,
        )
        position = valuation.position
        return PositionPnlOutput(
            position=position,
            pnl=valuation.pnl,
            in_range=is_in_range(valuation.current_tick, position.tick_lower, position.tick_upper),
            current_tick=valuation.current_tick,
            current_price=valuation.current_price,
            swaps_count=valuation.swaps_count,
        )
