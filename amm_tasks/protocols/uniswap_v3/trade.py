"""Exact-input swap construction against a single pool snapshot"""

import logging
import time

from ...core.exceptions import ExpiredDeadline, InsufficientLiquidity
from .encoding import encode_exact_input_single
from .math import MAX_TICK, MIN_TICK, compute_swap_step, sqrt_price_at_tick
from .types import SwapInstruction

logger = logging.getLogger(__name__)


def minimum_amount_out(expected_amount_out, slippage_tolerance):
    """expected / (1 + slippage), rounded down"""
    numerator = slippage_tolerance.numerator
    denominator = slippage_tolerance.denominator
    return (expected_amount_out * denominator) // (denominator + numerator)


class TradeBuilder:
    """
    Builds exactInputSingle instructions for the SwapRouter.

    The output estimate is a single swap step inside the spacing band that
    holds the current tick. Inputs large enough to reach the band edge would
    cross into the neighbouring range, which the snapshot does not describe,
    so they are rejected instead of being partially filled.
    """

    def __init__(self, router_address):
        self.router_address = router_address

    def build(self, snapshot, request, now=None):
        """
        Args:
            snapshot: PoolSnapshot fetched for this trade
            request: TradeRequest
            now: Unix time used for the deadline check (wall clock if None)

        Returns:
            SwapInstruction

        Raises:
            ExpiredDeadline: request.deadline is already in the past
            InsufficientLiquidity: the input does not fit inside the current band
        """
        now = time.time() if now is None else now
        if request.deadline < now:
            raise ExpiredDeadline(
                "Swap deadline already passed",
                deadline=request.deadline, now=int(now),
            )

        if not (snapshot.involves(request.input_token) and snapshot.involves(request.output_token)):
            raise ValueError(
                f"Pool {snapshot.address} does not trade "
                f"{request.input_token.address} -> {request.output_token.address}"
            )

        zero_for_one = request.input_token.address == snapshot.token0.address
        spacing = snapshot.tick_spacing
        liquidity = snapshot.liquidity
        band_lower = (snapshot.current_tick // spacing) * spacing
        if zero_for_one:
            boundary_tick = band_lower
            if snapshot.sqrt_price_x96 == sqrt_price_at_tick(band_lower) and band_lower in snapshot.ticks:
                # Price sits exactly on a spacing tick, so selling token0 crosses it first
                liquidity -= snapshot.ticks[band_lower].liquidity_net
                boundary_tick = band_lower - spacing
            boundary_tick = max(boundary_tick, MIN_TICK)
        else:
            boundary_tick = band_lower + spacing
            on_upper = boundary_tick <= MAX_TICK and snapshot.sqrt_price_x96 == sqrt_price_at_tick(boundary_tick)
            if on_upper and boundary_tick in snapshot.ticks:
                # A token0 sale can leave the price on the upper spacing tick with tick one below it
                liquidity += snapshot.ticks[boundary_tick].liquidity_net
                boundary_tick += spacing
            boundary_tick = min(boundary_tick, MAX_TICK)
        sqrt_target = sqrt_price_at_tick(boundary_tick)

        context = dict(
            pool=snapshot.address,
            amount_in=request.input_amount,
            liquidity=liquidity,
            boundary_tick=boundary_tick,
        )
        if liquidity <= 0:
            raise InsufficientLiquidity("Pool has no in-range liquidity", **context)

        sqrt_next, amount_in, amount_out, fee_amount = compute_swap_step(
            snapshot.sqrt_price_x96,
            sqrt_target,
            liquidity,
            request.input_amount,
            snapshot.fee,
        )
        if sqrt_next == sqrt_target:
            raise InsufficientLiquidity(
                "Input would cross the current tick range", max_amount_in=amount_in + fee_amount, **context
            )
        if amount_out == 0:
            raise InsufficientLiquidity("Input too small to produce any output", **context)

        amount_out_min = minimum_amount_out(amount_out, request.slippage_tolerance)
        calldata = encode_exact_input_single(
            token_in=request.input_token.address,
            token_out=request.output_token.address,
            fee=snapshot.fee,
            recipient=request.recipient,
            deadline=request.deadline,
            amount_in=request.input_amount,
            amount_out_minimum=amount_out_min,
        )
        logger.debug(
            "Trade %s %s -> expected %s, minimum %s (slippage %s)",
            request.input_amount, request.input_token, amount_out, amount_out_min,
            request.slippage_tolerance,
        )

        return SwapInstruction(
            router=self.router_address,
            pool_address=snapshot.address,
            token_in=request.input_token.address,
            token_out=request.output_token.address,
            fee=snapshot.fee,
            recipient=request.recipient,
            deadline=request.deadline,
            amount_in=request.input_amount,
            expected_amount_out=amount_out,
            amount_out_minimum=amount_out_min,
            sqrt_price_after_x96=sqrt_next,
            calldata=calldata,
        )
