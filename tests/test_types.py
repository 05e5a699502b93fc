"""
Tests for Uniswap V3 value objects and position range selection.
"""

from fractions import Fraction

import pytest

from amm_tasks.core.exceptions import InvalidSpacing, UnsupportedFeeTier
from amm_tasks.protocols.uniswap_v3.math import (
    MAX_TICK,
    MIN_TICK,
    encode_price_ratio,
    nearest_usable_tick,
    sqrt_price_x96_to_price,
    tick_at_sqrt_price,
)
from amm_tasks.protocols.uniswap_v3.position import range_around, range_for_price_ratio
from amm_tasks.protocols.uniswap_v3.types import (
    DEFAULT_SLIPPAGE,
    MintParams,
    PoolIdentity,
    PositionRange,
    Token,
    TradeRequest,
    deadline_from_now,
    sort_addresses,
)

from conftest import CHAIN_ID, TOKEN0_ADDRESS, TOKEN1_ADDRESS, WALLET


class TestToken:

    def test_address_is_checksummed(self):
        token = Token(address="0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48", decimals=6, chain_id=1)
        assert token.address == "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"

    def test_invalid_address(self):
        with pytest.raises(ValueError):
            Token(address="0x1234", decimals=18, chain_id=1)

    def test_sorts_before(self, token0, token1):
        assert token0.sorts_before(token1)
        assert not token1.sorts_before(token0)

    def test_different_chains(self, token0):
        other = Token(address=TOKEN1_ADDRESS, decimals=18, chain_id=1)
        with pytest.raises(ValueError):
            token0.sorts_before(other)

    def test_frozen(self, token0):
        with pytest.raises(Exception):
            token0.decimals = 8


class TestHelpers:

    def test_deadline_from_now(self):
        assert deadline_from_now(1, now=1000) == 1060
        assert deadline_from_now(5, now=1000.2) == 1301

    def test_deadline_must_be_positive(self):
        with pytest.raises(ValueError):
            deadline_from_now(0, now=1000)

    def test_sort_addresses(self):
        assert sort_addresses(TOKEN1_ADDRESS, TOKEN0_ADDRESS) == (TOKEN0_ADDRESS, TOKEN1_ADDRESS)

    def test_sort_identical(self):
        with pytest.raises(ValueError):
            sort_addresses(TOKEN0_ADDRESS, TOKEN0_ADDRESS.lower())


class TestPoolIdentity:

    def test_tokens_sorted(self, token0, token1):
        pool = PoolIdentity(token_a=token1, token_b=token0, fee=3000)
        assert pool.tokens == (token0, token1)
        assert pool.tick_spacing == 60

    def test_bad_fee(self, token0, token1):
        with pytest.raises(UnsupportedFeeTier):
            PoolIdentity(token_a=token0, token_b=token1, fee=100)

    def test_same_token(self, token0):
        with pytest.raises(ValueError):
            PoolIdentity(token_a=token0, token_b=token0, fee=500)


class TestPositionRange:

    def test_order(self):
        with pytest.raises(ValueError):
            PositionRange(60, 60)

    def test_in_bounds(self):
        assert PositionRange(-60, 60).in_bounds
        assert not PositionRange(MIN_TICK - 10, 0).in_bounds
        assert not PositionRange(0, MAX_TICK + 10).in_bounds


class TestMintParams:

    def _params(self, **overrides):
        values = dict(
            token0=TOKEN0_ADDRESS,
            token1=TOKEN1_ADDRESS,
            fee=3000,
            tick_lower=-60,
            tick_upper=60,
            amount0_desired=10 ** 18,
            amount1_desired=2 * 10 ** 6,
            recipient=WALLET,
            deadline=1060,
        )
        values.update(overrides)
        return MintParams(**values)

    def test_valid(self):
        params = self._params(amount0_min=10, amount1_min=20)
        assert params.to_tuple() == (
            TOKEN0_ADDRESS, TOKEN1_ADDRESS, 3000, -60, 60,
            10 ** 18, 2 * 10 ** 6, 10, 20, WALLET, 1060,
        )

    def test_token_order(self):
        with pytest.raises(ValueError, match="sort before"):
            self._params(token0=TOKEN1_ADDRESS, token1=TOKEN0_ADDRESS)

    def test_ticks_must_match_spacing(self):
        with pytest.raises(ValueError, match="spacing"):
            self._params(tick_lower=-50)

    def test_ticks_in_bounds(self):
        with pytest.raises(ValueError):
            self._params(tick_lower=-887_280, tick_upper=60)

    def test_min_exceeds_desired(self):
        with pytest.raises(ValueError, match="amount1_min"):
            self._params(amount1_min=3 * 10 ** 6)

    def test_negative_amount(self):
        with pytest.raises(ValueError):
            self._params(amount0_desired=-1)

    def test_both_amounts_zero(self):
        with pytest.raises(ValueError):
            self._params(amount0_desired=0, amount1_desired=0)

    def test_unsupported_fee(self):
        with pytest.raises(UnsupportedFeeTier):
            self._params(fee=2500)

    def test_create_sets_deadline(self):
        params = MintParams.create(
            token0=TOKEN0_ADDRESS,
            token1=TOKEN1_ADDRESS,
            fee=500,
            position_range=PositionRange(-10, 10),
            amount0_desired=5,
            amount1_desired=5,
            recipient=WALLET,
            deadline_minutes=2,
            now=1000,
        )
        assert params.deadline == 1120
        assert (params.tick_lower, params.tick_upper) == (-10, 10)


class TestTradeRequest:

    def test_defaults(self, token0, token1):
        request = TradeRequest.create(token0, token1, 10 ** 18, WALLET, now=1000)
        assert request.deadline == 1060
        assert request.slippage_tolerance == DEFAULT_SLIPPAGE == Fraction(1, 1000)

    def test_slippage_coerced_to_fraction(self, token0, token1):
        request = TradeRequest.create(token0, token1, 1, WALLET, slippage_tolerance="0.005", now=0)
        assert request.slippage_tolerance == Fraction(1, 200)

    @pytest.mark.parametrize("slippage", [Fraction(-1, 100), Fraction(1), Fraction(3, 2)])
    def test_slippage_range(self, token0, token1, slippage):
        with pytest.raises(ValueError):
            TradeRequest.create(token0, token1, 1, WALLET, slippage_tolerance=slippage, now=0)

    def test_float_slippage_rejected(self, token0, token1):
        with pytest.raises(TypeError):
            TradeRequest.create(token0, token1, 1, WALLET, slippage_tolerance=0.001, now=0)

    def test_amount_positive(self, token0, token1):
        with pytest.raises(ValueError):
            TradeRequest.create(token0, token1, 0, WALLET, now=0)

    def test_tokens_differ(self, token0):
        with pytest.raises(ValueError):
            TradeRequest.create(token0, token0, 1, WALLET, now=0)

    def test_bad_recipient(self, token0, token1):
        with pytest.raises(ValueError):
            TradeRequest.create(token0, token1, 1, "not-an-address", now=0)


class TestRangeAround:

    def test_centred_on_zero(self):
        assert range_around(0, 60) == PositionRange(-60, 60)

    def test_rounds_to_nearest(self):
        assert range_around(-269_393, 60) == PositionRange(-269_460, -269_340)

    @pytest.mark.parametrize("spacing", [10, 60, 200])
    @pytest.mark.parametrize("tick", [-887_000, -12_345, -1, 0, 7, 30, 99_999, 887_000])
    def test_shape(self, tick, spacing):
        position_range = range_around(tick, spacing)
        assert position_range.tick_lower % spacing == 0
        assert position_range.tick_upper % spacing == 0
        assert position_range.tick_upper - position_range.tick_lower == 2 * spacing
        assert position_range.tick_lower <= tick <= position_range.tick_upper

    @pytest.mark.parametrize("spacing", [0, -10])
    def test_invalid_spacing(self, spacing):
        with pytest.raises(InvalidSpacing):
            range_around(0, spacing)

    def test_for_price_ratio(self):
        # 1000 tokens of 18 decimals against 2000 of 6 decimals: price 2
        amount0, amount1 = 1000 * 10 ** 18, 2000 * 10 ** 6
        sqrt_price_x96 = encode_price_ratio(amount1, amount0)
        assert sqrt_price_x96 > 0
        assert sqrt_price_x96_to_price(sqrt_price_x96, 18, 6) == pytest.approx(2.0)

        tick = tick_at_sqrt_price(sqrt_price_x96)
        assert tick == -269393
        t = nearest_usable_tick(tick, 60)
        assert t == -269400

        position_range = range_for_price_ratio(amount0, amount1, 3000)
        assert (position_range.tick_lower, position_range.tick_upper) == (t - 60, t + 60)
        assert position_range.in_bounds
