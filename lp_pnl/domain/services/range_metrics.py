from __future__ import annotations

from decimal import Decimal, localcontext

from lp_pnl.domain.services.tick_math import DECIMAL_PRECISION, is_tick_in_domain, tick_to_price


def is_valid_tick_range(tick_lower: int, tick_upper: int) -> bool:
    return (
        tick_lower < tick_upper
        and is_tick_in_domain(tick_lower)
        and is_tick_in_domain(tick_upper)
    )


def is_in_range(current_tick: int, tick_lower: int, tick_upper: int) -> bool:
    return tick_lower <= current_tick < tick_upper


def distance_to_range_edge(current_tick: int, tick_lower: int, tick_upper: int) -> int:
    """Ticks to the nearest range bound; 0 when the tick is outside the range."""
    if not is_in_range(current_tick, tick_lower, tick_upper):
        return 0
    return min(current_tick - tick_lower, tick_upper - current_tick)


def range_width_percent(tick_lower: int, tick_upper: int) -> Decimal:
    price_lower = tick_to_price(tick_lower)
    price_upper = tick_to_price(tick_upper)
    if price_lower.is_zero():
        return Decimal("0")
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return ((price_upper - price_lower) / price_lower) * Decimal("100")
