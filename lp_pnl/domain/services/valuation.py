from __future__ import annotations

from decimal import Decimal, localcontext
from enum import Enum

from lp_pnl.domain.exceptions import InvalidInputError
from lp_pnl.domain.services.tick_math import DECIMAL_PRECISION


class Denomination(str, Enum):
    TOKEN1 = "token1"
    TOKEN0 = "token0"


def calculate_position_value(
    amount0: Decimal,
    amount1: Decimal,
    price: Decimal,
    denomination: Denomination = Denomination.TOKEN1,
) -> Decimal:
    """Single scalar value of a token pair at `price` (token1 per token0)."""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        if denomination is Denomination.TOKEN1:
            return amount0 * price + amount1
        if price <= 0:
            raise InvalidInputError("price must be positive for token0 valuation.")
        return amount0 + amount1 / price
