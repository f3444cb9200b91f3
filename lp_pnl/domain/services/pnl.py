from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from lp_pnl.domain.entities.pnl import PositionPnL
from lp_pnl.domain.entities.position import Position, Swap
from lp_pnl.domain.services.fee_estimation import FeeEstimator, calculate_fees_earned
from lp_pnl.domain.services.impermanent_loss import calculate_impermanent_loss


def calculate_net_pnl(fees_earned: Decimal, impermanent_loss: Decimal, gas_spent: Decimal) -> Decimal:
    return fees_earned - impermanent_loss - gas_spent


def calculate_position_pnl(
    position: Position,
    swaps: Iterable[Swap],
    initial_price: Decimal,
    current_price: Decimal,
    gas_spent: Decimal,
    fee_estimator: FeeEstimator | None = None,
) -> PositionPnL:
    fees_earned = calculate_fees_earned(position, swaps, fee_estimator)
    impermanent_loss = calculate_impermanent_loss(position, initial_price, current_price)
    return PositionPnL(
        fees_earned=fees_earned,
        impermanent_loss=impermanent_loss,
        gas_spent=gas_spent,
        net_pnl=calculate_net_pnl(fees_earned, impermanent_loss, gas_spent),
    )
