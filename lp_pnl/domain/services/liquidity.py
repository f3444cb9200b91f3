from __future__ import annotations

import logging
from decimal import Decimal, localcontext
from enum import Enum
from typing import NamedTuple

from lp_pnl.domain.services.range_metrics import is_valid_tick_range
from lp_pnl.domain.services.tick_math import (
    DECIMAL_PRECISION,
    clamp_tick,
    tick_to_sqrt_price,
    to_decimal,
)


logger = logging.getLogger(__name__)


class RangePosition(str, Enum):
    BELOW_RANGE = "below_range"
    IN_RANGE = "in_range"
    ABOVE_RANGE = "above_range"


class TokenAmounts(NamedTuple):
    amount0: Decimal
    amount1: Decimal


ZERO_AMOUNTS = TokenAmounts(Decimal("0"), Decimal("0"))


def classify_tick(current_tick: int, tick_lower: int, tick_upper: int) -> RangePosition:
    if current_tick < tick_lower:
        return RangePosition.BELOW_RANGE
    if current_tick < tick_upper:
        return RangePosition.IN_RANGE
    return RangePosition.ABOVE_RANGE


def classify_sqrt_price(
    sqrt_price: Decimal,
    sqrt_price_lower: Decimal,
    sqrt_price_upper: Decimal,
) -> RangePosition:
    if sqrt_price < sqrt_price_lower:
        return RangePosition.BELOW_RANGE
    if sqrt_price < sqrt_price_upper:
        return RangePosition.IN_RANGE
    return RangePosition.ABOVE_RANGE


def amounts_for_sqrt_prices(
    *,
    liquidity: Decimal,
    sqrt_price: Decimal,
    sqrt_price_lower: Decimal,
    sqrt_price_upper: Decimal,
    range_position: RangePosition,
) -> TokenAmounts:
    """Token amounts held by `liquidity` over [sqrt_price_lower, sqrt_price_upper).

    Below range the position is all token0, above range all token1:

        below: x = L * (sb - sa) / (sa * sb),  y = 0
        in:    x = L * (sb - sp) / (sp * sb),  y = L * (sp - sa)
        above: x = 0,                          y = L * (sb - sa)
    """
    sa = sqrt_price_lower
    sb = sqrt_price_upper
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        if range_position is RangePosition.BELOW_RANGE:
            return TokenAmounts(liquidity * (sb - sa) / (sa * sb), Decimal("0"))
        if range_position is RangePosition.ABOVE_RANGE:
            return TokenAmounts(Decimal("0"), liquidity * (sb - sa))
        sp = sqrt_price
        return TokenAmounts(liquidity * (sb - sp) / (sp * sb), liquidity * (sp - sa))


def _liquidity_or_none(liquidity: Decimal | int, tick_lower: int, tick_upper: int) -> Decimal | None:
    value = to_decimal(liquidity)
    if value.is_zero():
        return None
    if value < 0:
        logger.debug("liquidity: negative liquidity=%s, returning zero amounts", value)
        return None
    if not is_valid_tick_range(tick_lower, tick_upper):
        logger.debug(
            "liquidity: invalid range tick_lower=%s tick_upper=%s, returning zero amounts",
            tick_lower,
            tick_upper,
        )
        return None
    return value


def get_token_amounts_from_liquidity(
    liquidity: Decimal | int,
    current_tick: int,
    tick_lower: int,
    tick_upper: int,
) -> TokenAmounts:
    value = _liquidity_or_none(liquidity, tick_lower, tick_upper)
    if value is None:
        return ZERO_AMOUNTS

    tick = clamp_tick(current_tick)
    return amounts_for_sqrt_prices(
        liquidity=value,
        sqrt_price=tick_to_sqrt_price(tick),
        sqrt_price_lower=tick_to_sqrt_price(tick_lower),
        sqrt_price_upper=tick_to_sqrt_price(tick_upper),
        range_position=classify_tick(tick, tick_lower, tick_upper),
    )


def get_token_amounts_at_price(
    liquidity: Decimal | int,
    price: Decimal,
    tick_lower: int,
    tick_upper: int,
) -> TokenAmounts:
    value = _liquidity_or_none(liquidity, tick_lower, tick_upper)
    if value is None:
        return ZERO_AMOUNTS
    price_value = to_decimal(price)
    if not price_value.is_finite() or price_value <= 0:
        logger.debug("liquidity: non-positive price=%s, returning zero amounts", price_value)
        return ZERO_AMOUNTS

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        sqrt_price = price_value.sqrt()
    sqrt_price_lower = tick_to_sqrt_price(tick_lower)
    sqrt_price_upper = tick_to_sqrt_price(tick_upper)
    return amounts_for_sqrt_prices(
        liquidity=value,
        sqrt_price=sqrt_price,
        sqrt_price_lower=sqrt_price_lower,
        sqrt_price_upper=sqrt_price_upper,
        range_position=classify_sqrt_price(sqrt_price, sqrt_price_lower, sqrt_price_upper),
    )
