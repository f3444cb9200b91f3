from __future__ import annotations

import logging

from lp_pnl.application.dto.positions import PositionQueryInput
from lp_pnl.application.ports.positions_port import PositionsPort
from lp_pnl.application.use_cases.position_common import Clock, evaluate_position, utc_now
from lp_pnl.domain.entities.position import PositionSnapshot
from lp_pnl.domain.services.fee_estimation import FeeEstimator


logger = logging.getLogger(__name__)


class RecordPositionSnapshotUseCase:
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

    def execute(self, command: PositionQueryInput) -> PositionSnapshot:
        now = self._clock()
        valuation = evaluate_position(
            positions_port=self._positions_port,
            fee_estimator=self._fee_estimator,
            swap_lookback_hours=self._swap_lookback_hours,
            now=now,
            command=command,
        )
        stored = self._positions_port.insert_snapshot(
            snapshot=PositionSnapshot(
                id=None,
                position_id=valuation.position.id,
                timestamp=now,
                fees_earned=valuation.pnl.fees_earned,
                liquidity=valuation.position.liquidity,
                price=valuation.current_price,
            )
        )
        logger.info(
            "positions: snapshot recorded position=%s snapshot_id=%s",
            valuation.position.nft_id,
            stored.id,
        )
        return stored
