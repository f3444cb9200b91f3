from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, localcontext

from lp_pnl.domain.entities.position import Position
from lp_pnl.domain.services.liquidity import ZERO_AMOUNTS, TokenAmounts, get_token_amounts_at_price
from lp_pnl.domain.services.range_metrics import is_valid_tick_range
from lp_pnl.domain.services.tick_math import DECIMAL_PRECISION, to_decimal
from lp_pnl.domain.services.valuation import Denomination, calculate_position_value


# Relative to the initial price.
# Relative to the initial price.
PRICE_MOVE_TOLERANCE = Decimal("0.000001")
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImpermanentLossBreakdown:
    initial_amounts: TokenAmounts
    current_amounts: TokenAmounts
    hodl_value: Decimal
    current_value: Decimal
    impermanent_loss: Decimal


_ZERO_BREAKDOWN = ImpermanentLossBreakdown(
    initial_amounts=ZERO_AMOUNTS,
    current_amounts=ZERO_AMOUNTS,
    hodl_value=Decimal("0"),
    current_value=Decimal("0"),
    impermanent_loss=Decimal("0"),
)


def calculate_impermanent_loss_breakdown(
    position: Position,
    initial_price: Decimal,
    current_price: Decimal,
) -> ImpermanentLossBreakdown:
    """Compare the position against holding its initial composition.

    The amounts at `initial_price` are frozen and revalued at `current_price`
    (hodl value), then compared with the amounts the same liquidity holds at
    `current_price`. Both values are token1-denominated:

        IL = (V_hodl - V_current) / V_hodl

    Degenerate inputs (non-positive prices, zero liquidity, invalid range,
    zero hodl value) yield IL = 0. The result is clamped at zero.
    """
    p0 = to_decimal(initial_price)
    p1 = to_decimal(current_price)
    if not p0.is_finite() or not p1.is_finite() or p0 <= 0 or p1 <= 0:
        logger.debug("impermanent_loss: non-positive price initial=%s current=%s", p0, p1)
        return _ZERO_BREAKDOWN
    if position.liquidity <= 0:
        return _ZERO_BREAKDOWN
    if not is_valid_tick_range(position.tick_lower, position.tick_upper):
        logger.debug(
            "impermanent_loss: invalid range position=%s tick_lower=%s tick_upper=%s",
            position.nft_id,
            position.tick_lower,
            position.tick_upper,
        )
        return _ZERO_BREAKDOWN

    initial = get_token_amounts_at_price(position.liquidity, p0, position.tick_lower, position.tick_upper)
    current = get_token_amounts_at_price(position.liquidity, p1, position.tick_lower, position.tick_upper)
    hodl_value = calculate_position_value(initial.amount0, initial.amount1, p1, Denomination.TOKEN1)
    current_value = calculate_position_value(current.amount0, current.amount1, p1, Denomination.TOKEN1)

    if hodl_value <= 0:
        logger.debug("impermanent_loss: zero hodl value position=%s", position.nft_id)
        il = Decimal("0")
    elif abs(p1 - p0) < PRICE_MOVE_TOLERANCE * p0:
        il = Decimal("0")
    else:
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            il = max((hodl_value - current_value) / hodl_value, Decimal("0"))

    return ImpermanentLossBreakdown(
        initial_amounts=initial,
        current_amounts=current,
        hodl_value=hodl_value,
        current_value=current_value,
        impermanent_loss=il,
    )


def calculate_impermanent_loss(
    position: Position,
    initial_price: Decimal,
    current_price: Decimal,
) -> Decimal:
    return calculate_impermanent_loss_breakdown(position, initial_price, current_price).impermanent_loss
