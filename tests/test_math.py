"""
Tests for protocols.uniswap_v3.math.

Covers:
    - encode_price_ratio
    - sqrt_price_at_tick / tick_at_sqrt_price (known protocol values, round trips)
    - nearest_usable_tick
    - SqrtPriceMath amount deltas and compute_swap_step
    - display helpers
"""

import pytest

from amm_tasks.core.exceptions import DivisionByZero, InvalidSpacing
from amm_tasks.protocols.uniswap_v3.math import (
    MAX_SQRT_RATIO,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MIN_TICK,
    Q96,
    compute_swap_step,
    encode_price_ratio,
    get_amount0_delta,
    get_amount1_delta,
    mul_div,
    mul_div_rounding_up,
    nearest_usable_tick,
    sqrt_price_at_tick,
    sqrt_price_x96_to_price,
    tick_at_sqrt_price,
    tick_to_price,
)


SAMPLE_TICKS = [MIN_TICK, -500_000, -269_393, -60, -1, 0, 1, 59, 60, 12_345, 500_000, MAX_TICK - 1]


# ===================================================================
# encode_price_ratio
# ===================================================================
class TestEncodePriceRatio:

    def test_one_to_one_is_q96(self):
        assert encode_price_ratio(1, 1) == Q96

    @pytest.mark.parametrize(
        "amount1, amount0, expected",
        [
            (4, 1, 2 * Q96),
            (1, 4, Q96 // 2),
            (100, 1, 10 * Q96),
            (10 ** 18, 10 ** 18, Q96),
        ],
        ids=["price-4", "price-quarter", "price-100", "equal-large"],
    )
    def test_known_values(self, amount1, amount0, expected):
        assert encode_price_ratio(amount1, amount0) == expected

    def test_floors_irrational_root(self):
        # sqrt(2) * 2^96 is irrational; result must be the floor
        value = encode_price_ratio(2, 1)
        assert value * value <= 2 * Q96 * Q96 < (value + 1) * (value + 1)

    def test_zero_denominator(self):
        with pytest.raises(DivisionByZero):
            encode_price_ratio(1, 0)

    def test_zero_denominator_is_zero_division(self):
        with pytest.raises(ZeroDivisionError):
            encode_price_ratio(5, 0)

    def test_non_positive_numerator(self):
        with pytest.raises(ValueError):
            encode_price_ratio(0, 1)


# ===================================================================
# Tick curve
# ===================================================================
class TestTickCurve:

    def test_tick_zero_is_q96(self):
        assert sqrt_price_at_tick(0) == Q96

    def test_min_tick(self):
        assert sqrt_price_at_tick(MIN_TICK) == MIN_SQRT_RATIO

    def test_max_tick(self):
        assert sqrt_price_at_tick(MAX_TICK) == MAX_SQRT_RATIO

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            sqrt_price_at_tick(MAX_TICK + 1)
        with pytest.raises(ValueError):
            sqrt_price_at_tick(MIN_TICK - 1)

    def test_monotonic(self):
        prices = [sqrt_price_at_tick(t) for t in range(-100, 101)]
        assert prices == sorted(prices)
        assert len(set(prices)) == len(prices)

    def test_q96_is_tick_zero(self):
        assert tick_at_sqrt_price(Q96) == 0

    def test_min_ratio_is_min_tick(self):
        assert tick_at_sqrt_price(MIN_SQRT_RATIO) == MIN_TICK

    def test_just_below_max_ratio(self):
        assert tick_at_sqrt_price(MAX_SQRT_RATIO - 1) == MAX_TICK - 1

    def test_max_ratio_rejected(self):
        with pytest.raises(ValueError):
            tick_at_sqrt_price(MAX_SQRT_RATIO)

    @pytest.mark.parametrize("tick", SAMPLE_TICKS)
    def test_round_trip(self, tick):
        assert tick_at_sqrt_price(sqrt_price_at_tick(tick)) == tick

    @pytest.mark.parametrize("tick", SAMPLE_TICKS)
    def test_one_below_tick_price_is_previous_tick(self, tick):
        if tick == MIN_TICK:
            pytest.skip("no tick below MIN_TICK")
        assert tick_at_sqrt_price(sqrt_price_at_tick(tick) - 1) == tick - 1

    @pytest.mark.parametrize("amount1, amount0", [(1, 1), (2, 1), (3, 7), (2_000_000, 10 ** 18), (10 ** 30, 3)])
    def test_encoded_price_is_bracketed(self, amount1, amount0):
        sqrt_price = encode_price_ratio(amount1, amount0)
        tick = tick_at_sqrt_price(sqrt_price)
        assert sqrt_price_at_tick(tick) <= sqrt_price < sqrt_price_at_tick(tick + 1)


# ===================================================================
# nearest_usable_tick
# ===================================================================
class TestNearestUsableTick:

    @pytest.mark.parametrize(
        "tick, spacing, expected",
        [
            (0, 60, 0),
            (29, 60, 0),
            (30, 60, 60),
            (-30, 60, 0),
            (-31, 60, -60),
            (95, 10, 100),
            (-269_393, 60, -269_400),
            (1234, 200, 1200),
        ],
    )
    def test_rounding(self, tick, spacing, expected):
        assert nearest_usable_tick(tick, spacing) == expected

    def test_ties_round_up(self):
        assert nearest_usable_tick(5, 10) == 10
        assert nearest_usable_tick(-5, 10) == 0

    def test_clamped_at_max(self):
        assert nearest_usable_tick(MAX_TICK, 60) == 887_220

    def test_clamped_at_min(self):
        assert nearest_usable_tick(MIN_TICK, 60) == -887_220

    @pytest.mark.parametrize("spacing", [10, 60, 200])
    @pytest.mark.parametrize("tick", SAMPLE_TICKS)
    def test_idempotent(self, tick, spacing):
        usable = nearest_usable_tick(tick, spacing)
        assert usable % spacing == 0
        assert nearest_usable_tick(usable, spacing) == usable
        assert MIN_TICK <= usable <= MAX_TICK

    @pytest.mark.parametrize("spacing", [0, -60])
    def test_invalid_spacing(self, spacing):
        with pytest.raises(InvalidSpacing):
            nearest_usable_tick(0, spacing)


# ===================================================================
# FullMath / SqrtPriceMath / SwapMath
# ===================================================================
class TestFullMath:

    def test_mul_div_floors(self):
        assert mul_div(7, 3, 2) == 10

    def test_mul_div_rounding_up(self):
        assert mul_div_rounding_up(7, 3, 2) == 11
        assert mul_div_rounding_up(4, 3, 2) == 6

    def test_zero_denominator(self):
        with pytest.raises(DivisionByZero):
            mul_div(1, 1, 0)


class TestAmountDeltas:

    def test_amount1_delta_one_to_four(self):
        # L * (sqrt(4) - sqrt(1)) == L
        assert get_amount1_delta(Q96, 2 * Q96, 10 ** 18, False) == 10 ** 18

    def test_amount0_delta_one_to_four(self):
        # L * (1/sqrt(1) - 1/sqrt(4)) == L / 2
        assert get_amount0_delta(Q96, 2 * Q96, 10 ** 18, False) == 5 * 10 ** 17

    def test_rounding_up_never_below(self):
        a = sqrt_price_at_tick(-7)
        b = sqrt_price_at_tick(13)
        for round_up in (False, True):
            assert get_amount0_delta(a, b, 12345, True) >= get_amount0_delta(a, b, 12345, round_up)
            assert get_amount1_delta(a, b, 12345, True) >= get_amount1_delta(a, b, 12345, round_up)


class TestComputeSwapStep:

    def test_partial_fill_zero_for_one(self):
        current = sqrt_price_at_tick(30)
        target = sqrt_price_at_tick(0)
        sqrt_next, amount_in, amount_out, fee = compute_swap_step(current, target, 10 ** 24, 10 ** 18, 3000)

        assert target < sqrt_next < current
        assert amount_in + fee == 10 ** 18
        assert fee == 10 ** 18 - amount_in
        assert 0 < amount_out < 10 ** 18 * 1.004

    def test_partial_fill_one_for_zero(self):
        current = sqrt_price_at_tick(30)
        target = sqrt_price_at_tick(60)
        sqrt_next, amount_in, amount_out, fee = compute_swap_step(current, target, 10 ** 24, 10 ** 18, 3000)

        assert current < sqrt_next < target
        assert amount_in + fee == 10 ** 18
        assert 0 < amount_out < 10 ** 18

    def test_reaches_target_with_large_input(self):
        current = sqrt_price_at_tick(30)
        target = sqrt_price_at_tick(0)
        sqrt_next, amount_in, amount_out, fee = compute_swap_step(current, target, 10 ** 18, 10 ** 30, 3000)

        assert sqrt_next == target
        assert amount_in + fee < 10 ** 30

    def test_fee_free_step_matches_deltas(self):
        current = Q96
        target = 2 * Q96
        sqrt_next, amount_in, amount_out, fee = compute_swap_step(current, target, 10 ** 18, 10 ** 18, 0)

        assert sqrt_next == target
        assert amount_in == 10 ** 18
        assert amount_out == 5 * 10 ** 17
        assert fee == 0


# ===================================================================
# Display helpers
# ===================================================================
class TestDisplayHelpers:

    def test_tick_zero_same_decimals(self):
        assert tick_to_price(0, 18, 18) == 1.0

    def test_eighteen_six_decimals_price(self):
        # 1 token0 (18 decimals) for 2 token1 (6 decimals)
        sqrt_price = encode_price_ratio(2 * 10 ** 6, 10 ** 18)
        assert sqrt_price_x96_to_price(sqrt_price, 18, 6) == pytest.approx(2.0, rel=1e-12)

    def test_tick_and_sqrt_price_agree(self):
        tick = -269_393
        assert tick_to_price(tick, 18, 6) == pytest.approx(
            sqrt_price_x96_to_price(sqrt_price_at_tick(tick), 18, 6), rel=1e-9
        )
