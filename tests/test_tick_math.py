from __future__ import annotations

from decimal import Decimal

import pytest

from lp_pnl.domain.exceptions import InvalidInputError
from lp_pnl.domain.services.tick_math import (
    MAX_TICK,
    MIN_TICK,
    clamp_tick,
    price_to_tick,
    sqrt_price_x96_to_price,
    tick_to_price,
    tick_to_sqrt_price,
    tick_to_sqrt_price_x96,
)


class TestTickMath:
    def test_tick_zero_is_unit_price(self):
        assert tick_to_sqrt_price(0) == Decimal("1")
        assert tick_to_price(0) == Decimal("1")

    def test_tick_one_is_one_basis_point(self):
        assert abs(tick_to_price(1) - Decimal("1.0001")) < Decimal("1e-30")

    def test_sign_of_tick_moves_price(self):
        assert tick_to_price(100) > Decimal("1")
        assert tick_to_price(-100) < Decimal("1")
        assert tick_to_sqrt_price(100) > Decimal("1")
        assert tick_to_sqrt_price(-100) < Decimal("1")

    def test_price_is_square_of_sqrt_price(self):
        sqrt_price = tick_to_sqrt_price(1000)
        assert abs(sqrt_price * sqrt_price - tick_to_price(1000)) < Decimal("1e-25")

    @pytest.mark.parametrize(
        "tick",
        [MIN_TICK, -200000, -1000, -1, 0, 1, 953, 50000, 200000, MAX_TICK],
    )
    def test_round_trip_is_within_one_tick(self, tick):
        assert abs(price_to_tick(tick_to_price(tick)) - tick) <= 1

    def test_price_to_tick_rounds_to_nearest(self):
        assert price_to_tick(Decimal("1.1")) == 953
        assert price_to_tick(Decimal("1")) == 0
        assert price_to_tick(Decimal("0.9")) == -1054

    def test_price_to_tick_accepts_strings_and_ints(self):
        assert price_to_tick("1.1") == 953
        assert price_to_tick(1) == 0

    @pytest.mark.parametrize("price", [Decimal("0"), Decimal("-1"), Decimal("NaN"), Decimal("Infinity")])
    def test_price_to_tick_rejects_invalid_prices(self, price):
        with pytest.raises(InvalidInputError):
            price_to_tick(price)

    def test_ticks_outside_domain_are_clamped(self):
        assert clamp_tick(MAX_TICK + 10) == MAX_TICK
        assert clamp_tick(MIN_TICK - 10) == MIN_TICK
        assert tick_to_sqrt_price(10**9) == tick_to_sqrt_price(MAX_TICK)
        assert tick_to_sqrt_price(-(10**9)) == tick_to_sqrt_price(MIN_TICK)

    def test_extreme_prices_map_to_domain_bounds(self):
        assert price_to_tick(Decimal("1e100")) == MAX_TICK
        assert price_to_tick(Decimal("1e-100")) == MIN_TICK

    def test_sqrt_price_x96_helpers(self):
        assert tick_to_sqrt_price_x96(0) == 2**96
        assert sqrt_price_x96_to_price(2**96) == Decimal("1")
        assert sqrt_price_x96_to_price(2**97) == Decimal("4")
        with pytest.raises(InvalidInputError):
            sqrt_price_x96_to_price(0)
