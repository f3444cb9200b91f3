from __future__ import annotations

import logging

from lp_pnl.application.dto.positions import PositionHealthOutput, PositionQueryInput
from lp_pnl.application.ports.positions_port import PositionsPort
from lp_pnl.application.use_cases.position_common import Clock, evaluate_position, utc_now
from lp_pnl.domain.services.fee_estimation import FeeEstimator
from lp_pnl.domain.services.health import HealthThresholds, get_health_details
from lp_pnl.domain.services.range_metrics import is_valid_tick_range, range_width_percent


logger = logging.getLogger(__name__)


class GetPositionHealthUseCase:
    def __init__(
        self,
        *,
        positions_port: PositionsPort,
        fee_estimator: FeeEstimator,
        thresholds: HealthThresholds | None = None,
        swap_lookback_hours: int = 24,
        clock: Clock = utc_now,
    ):
        self._positions_port = positions_port
        self._fee_estimator = fee_estimator
        self._thresholds = thresholds or HealthThresholds()
        self._swap_lookback_hours = swap_lookback_hours
        self._clock = clock

    def execute(self, command: PositionQueryInput) -> PositionHealthOutput:
        valuation = evaluate_position(
            positions_port=self._positions_port,
            fee_estimator=self._fee_estimator,
            swap_lookback_hours=self._swap_lookback_hours,
            now=self._clock(),
            command=command,
        )
        position = valuation.position
        report = get_health_details(
            position,
            valuation.current_tick,
            valuation.pnl,
            self._thresholds,
        )
        logger.info(
            "positions: health position=%s tick=%s status=%s",
            position.nft_id,
            valuation.current_tick,
            report.status.value,
        )
        width_percent = (
            range_width_percent(position.tick_lower, position.tick_upper)
            if is_valid_tick_range(position.tick_lower, position.tick_upper)
            else None
        )
        return PositionHealthOutput(
            position=position,
            pnl=valuation.pnl,
            report=report,
            current_tick=valuation.current_tick,
            range_width_percent=width_percent,
        )
