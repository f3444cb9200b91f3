from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, localcontext

from lp_pnl.domain.exceptions import InvalidInputError


MIN_TICK = -887272
MAX_TICK = 887272
DECIMAL_PRECISION = 50
TICK_BASE = Decimal("1.0001")
Q96 = Decimal(2**96)

with localcontext() as _ctx:
    _ctx.prec = DECIMAL_PRECISION
    LOG_BASE = TICK_BASE.ln()


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def clamp_tick(tick: int) -> int:
    return max(MIN_TICK, min(MAX_TICK, int(tick)))


def is_tick_in_domain(tick: int) -> bool:
    return MIN_TICK <= tick <= MAX_TICK


def tick_to_sqrt_price(tick: int) -> Decimal:
    """sqrt(1.0001^tick) evaluated as exp(tick/2 * ln(1.0001)).

    Ticks outside [MIN_TICK, MAX_TICK] are clamped to the nearest bound before
    exponentiation, so extreme inputs map to the boundary price.
    """
    bounded = clamp_tick(tick)
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return (Decimal(bounded) * LOG_BASE / 2).exp()


def tick_to_price(tick: int) -> Decimal:
    sqrt_price = tick_to_sqrt_price(tick)
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return sqrt_price * sqrt_price


def price_to_tick(price: Decimal | int | str) -> int:
    """Nearest tick for a price. Round trips through tick_to_price are exact to within one tick."""
    value = to_decimal(price)
    if not value.is_finite() or value <= 0:
        raise InvalidInputError("price must be positive.")
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        raw_tick = value.ln() / LOG_BASE
        tick = int(raw_tick.to_integral_value(rounding=ROUND_HALF_EVEN))
    return clamp_tick(tick)


def tick_to_sqrt_price_x96(tick: int) -> int:
    sqrt_price = tick_to_sqrt_price(tick)
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return int((sqrt_price * Q96).to_integral_value())


def sqrt_price_x96_to_price(sqrt_price_x96: int) -> Decimal:
    if sqrt_price_x96 <= 0:
        raise InvalidInputError("sqrt_price_x96 must be positive.")
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        sqrt_price = Decimal(sqrt_price_x96) / Q96
        return sqrt_price * sqrt_price
