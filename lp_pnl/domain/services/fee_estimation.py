from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal, localcontext
from typing import Protocol

from lp_pnl.domain.entities.position import Position, Swap
from lp_pnl.domain.exceptions import InvalidInputError
from lp_pnl.domain.services.tick_math import DECIMAL_PRECISION


DEFAULT_FEE_RATE = Decimal("0.003")
DEFAULT_POOL_SHARE = Decimal("0.01")
logger = logging.getLogger(__name__)


class FeeEstimator(Protocol):
    def estimate(self, position: Position, swaps: Iterable[Swap]) -> Decimal:
        ...


class FixedShareFeeEstimator:
    """Fees as fee_rate * pool_share * sum(|amount0| + |amount1|) over the pool's swaps.

    Approximation: assumes the position was in range for every swap and held a
    constant share of pool liquidity. Exact accrual needs per-swap in-range
    liquidity share tracking and should be provided as another FeeEstimator.
    """

    def __init__(
        self,
        *,
        fee_rate: Decimal = DEFAULT_FEE_RATE,
        pool_share: Decimal = DEFAULT_POOL_SHARE,
    ):
        if fee_rate < 0:
            raise InvalidInputError("fee_rate must be non-negative.")
        if pool_share < 0 or pool_share > 1:
            raise InvalidInputError("pool_share must be between 0 and 1.")
        self._fee_rate = fee_rate
        self._pool_share = pool_share

    @property
    def fee_rate(self) -> Decimal:
        return self._fee_rate

    @property
    def pool_share(self) -> Decimal:
        return self._pool_share

    def estimate(self, position: Position, swaps: Iterable[Swap]) -> Decimal:
        pool_id = position.pool_id.lower()
        volume = Decimal("0")
        skipped = 0
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            for swap in swaps:
                if swap.pool_id.lower() != pool_id:
                    skipped += 1
                    continue
                volume += abs(Decimal(swap.amount0)) + abs(Decimal(swap.amount1))
            fees = volume * self._fee_rate * self._pool_share
        if skipped:
            logger.debug(
                "fee_estimation: skipped %s swaps from other pools position=%s",
                skipped,
                position.nft_id,
            )
        if volume.is_zero():
            return Decimal("0")
        return fees


def calculate_fees_earned(
    position: Position,
    swaps: Iterable[Swap],
    estimator: FeeEstimator | None = None,
) -> Decimal:
    return (estimator or FixedShareFeeEstimator()).estimate(position, swaps)
