"""
Math utilities for Uniswap V3 calculations

Integer functions reproduce the core contracts' TickMath, SqrtPriceMath and
SwapMath libraries bit for bit; the float helpers at the bottom are for display
only and never feed calldata.
"""

from math import isqrt

from ...core.exceptions import DivisionByZero, InvalidSpacing

Q96 = 2 ** 96
Q192 = 2 ** 192
MAX_UINT256 = 2 ** 256 - 1

MIN_TICK = -887272
MAX_TICK = 887272
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342

FEE_DENOMINATOR = 1_000_000


# ---------------------------------------------------------------------------
# FullMath
# ---------------------------------------------------------------------------

def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator)"""
    if denominator == 0:
        raise DivisionByZero("mul_div by zero", a=a, b=b)
    return (a * b) // denominator


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """ceil(a * b / denominator)"""
    if denominator == 0:
        raise DivisionByZero("mul_div_rounding_up by zero", a=a, b=b)
    return -((-a * b) // denominator)


def div_rounding_up(x: int, y: int) -> int:
    return -(-x // y)


# ---------------------------------------------------------------------------
# Price encoding and tick curve
# ---------------------------------------------------------------------------

def encode_price_ratio(amount1: int, amount0: int) -> int:
    """
    Encode the price amount1/amount0 as a sqrtPriceX96.

    Args:
        amount1: Amount of token1 in its smallest unit
        amount0: Amount of token0 in its smallest unit

    Returns:
        floor(sqrt((amount1 << 192) / amount0))

    Raises:
        DivisionByZero: amount0 is zero
    """
    amount1 = int(amount1)
    amount0 = int(amount0)
    if amount0 == 0:
        raise DivisionByZero("Price ratio denominator (amount0) is zero", amount1=amount1)
    if amount0 < 0 or amount1 <= 0:
        raise ValueError(f"Amounts must be positive: amount0={amount0}, amount1={amount1}")
    ratio_x192 = (amount1 << 192) // amount0
    return isqrt(ratio_x192)


def sqrt_price_at_tick(tick: int) -> int:
    """
    sqrt(1.0001^tick) * 2^96, as TickMath.getSqrtRatioAtTick.

    Raises:
        ValueError: tick outside [MIN_TICK, MAX_TICK]
    """
    if tick < MIN_TICK or tick > MAX_TICK:
        raise ValueError(f"Tick out of range: {tick} (range: {MIN_TICK} to {MAX_TICK})")

    abs_tick = abs(tick)

    ratio = 0xfffcb933bd6fad37aa2d162d1a594001 if abs_tick & 0x1 else 0x100000000000000000000000000000000
    if abs_tick & 0x2:
        ratio = (ratio * 0xfff97272373d413259a46990580e213a) >> 128
    if abs_tick & 0x4:
        ratio = (ratio * 0xfff2e50f5f656932ef12357cf3c7fdcc) >> 128
    if abs_tick & 0x8:
        ratio = (ratio * 0xffe5caca7e10e4e61c3624eaa0941cd0) >> 128
    if abs_tick & 0x10:
        ratio = (ratio * 0xffcb9843d60f6159c9db58835c926644) >> 128
    if abs_tick & 0x20:
        ratio = (ratio * 0xff973b41fa98c081472e6896dfb254c0) >> 128
    if abs_tick & 0x40:
        ratio = (ratio * 0xff2ea16466c96a3843ec78b326b52861) >> 128
    if abs_tick & 0x80:
        ratio = (ratio * 0xfe5dee046a99a2a811c461f1969c3053) >> 128
    if abs_tick & 0x100:
        ratio = (ratio * 0xfcbe86c7900a88aedcffc83b479aa3a4) >> 128
    if abs_tick & 0x200:
        ratio = (ratio * 0xf987a7253ac413176f2b074cf7815e54) >> 128
    if abs_tick & 0x400:
        ratio = (ratio * 0xf3392b0822b70005940c7a398e4b70f3) >> 128
    if abs_tick & 0x800:
        ratio = (ratio * 0xe7159475a2c29b7443b29c7fa6e889d9) >> 128
    if abs_tick & 0x1000:
        ratio = (ratio * 0xd097f3bdfd2022b8845ad8f792aa5825) >> 128
    if abs_tick & 0x2000:
        ratio = (ratio * 0xa9f746462d870fdf8a65dc1f90e061e5) >> 128
    if abs_tick & 0x4000:
        ratio = (ratio * 0x70d869a156d2a1b890bb3df62baf32f7) >> 128
    if abs_tick & 0x8000:
        ratio = (ratio * 0x31be135f97d08fd981231505542fcfa6) >> 128
    if abs_tick & 0x10000:
        ratio = (ratio * 0x9aa508b5b7a84e1c677de54f3e99bc9) >> 128
    if abs_tick & 0x20000:
        ratio = (ratio * 0x5d6af8dedb81196699c329225ee604) >> 128
    if abs_tick & 0x40000:
        ratio = (ratio * 0x2216e584f5fa1ea926041bedfe98) >> 128
    if abs_tick & 0x80000:
        ratio = (ratio * 0x48a170391f7dc42444e8fa2) >> 128

    if tick > 0:
        ratio = MAX_UINT256 // ratio

    # Q128.128 -> Q64.96, rounding up
    return (ratio >> 32) + (1 if ratio % (1 << 32) else 0)


def tick_at_sqrt_price(sqrt_price_x96: int) -> int:
    """
    Greatest tick whose sqrt price is <= sqrt_price_x96, as TickMath.getTickAtSqrtRatio.

    Raises:
        ValueError: price outside [MIN_SQRT_RATIO, MAX_SQRT_RATIO)
    """
    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise ValueError(f"sqrtPriceX96 out of range: {sqrt_price_x96}")

    ratio = sqrt_price_x96 << 32
    msb = ratio.bit_length() - 1

    if msb >= 128:
        r = ratio >> (msb - 127)
    else:
        r = ratio << (127 - msb)

    log_2 = (msb - 128) << 64

    # 14 bits of fractional log2, same as the contract
    for shift in range(63, 49, -1):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << shift
        r >>= f

    log_sqrt10001 = log_2 * 255738958999603826347141

    tick_low = (log_sqrt10001 - 3402992956809132418596140100660247210) >> 128
    tick_high = (log_sqrt10001 + 291339464771989622907027621153398088495) >> 128

    if tick_low == tick_high:
        return tick_low
    return tick_high if sqrt_price_at_tick(tick_high) <= sqrt_price_x96 else tick_low


def nearest_usable_tick(tick: int, spacing: int) -> int:
    """
    Round a tick to the nearest multiple of spacing, ties toward +infinity.

    Results that would fall outside the tick range are pulled back inside by
    one spacing.

    Raises:
        InvalidSpacing: spacing <= 0
    """
    if spacing <= 0:
        raise InvalidSpacing(f"Tick spacing must be positive, got {spacing}")
    if tick < MIN_TICK or tick > MAX_TICK:
        raise ValueError(f"Tick out of range: {tick}")

    rounded = ((2 * tick + spacing) // (2 * spacing)) * spacing
    if rounded < MIN_TICK:
        return rounded + spacing
    if rounded > MAX_TICK:
        return rounded - spacing
    return rounded


# ---------------------------------------------------------------------------
# SqrtPriceMath
# ---------------------------------------------------------------------------

def get_amount0_delta(sqrt_a: int, sqrt_b: int, liquidity: int, round_up: bool) -> int:
    """token0 amount between two sqrt prices for a given liquidity"""
    if sqrt_a > sqrt_b:
        sqrt_a, sqrt_b = sqrt_b, sqrt_a
    if sqrt_a <= 0:
        raise ValueError("sqrt price must be positive")

    numerator1 = liquidity << 96
    numerator2 = sqrt_b - sqrt_a

    if round_up:
        return div_rounding_up(mul_div_rounding_up(numerator1, numerator2, sqrt_b), sqrt_a)
    return mul_div(numerator1, numerator2, sqrt_b) // sqrt_a


def get_amount1_delta(sqrt_a: int, sqrt_b: int, liquidity: int, round_up: bool) -> int:
    """token1 amount between two sqrt prices for a given liquidity"""
    if sqrt_a > sqrt_b:
        sqrt_a, sqrt_b = sqrt_b, sqrt_a

    if round_up:
        return mul_div_rounding_up(liquidity, sqrt_b - sqrt_a, Q96)
    return mul_div(liquidity, sqrt_b - sqrt_a, Q96)


def _next_sqrt_price_from_amount0_rounding_up(sqrt_price: int, liquidity: int, amount: int) -> int:
    # Input of token0 only ever pushes the price down
    if amount == 0:
        return sqrt_price
    numerator1 = liquidity << 96
    product = amount * sqrt_price
    denominator = numerator1 + product
    if product <= MAX_UINT256 and denominator <= MAX_UINT256:
        return mul_div_rounding_up(numerator1, sqrt_price, denominator)
    return div_rounding_up(numerator1, numerator1 // sqrt_price + amount)


def _next_sqrt_price_from_amount1_rounding_down(sqrt_price: int, liquidity: int, amount: int) -> int:
    return sqrt_price + mul_div(amount, Q96, liquidity)


def get_next_sqrt_price_from_input(sqrt_price: int, liquidity: int, amount_in: int, zero_for_one: bool) -> int:
    """Price after adding amount_in of the input token at constant liquidity"""
    if sqrt_price <= 0 or liquidity <= 0:
        raise ValueError("sqrt price and liquidity must be positive")
    if zero_for_one:
        return _next_sqrt_price_from_amount0_rounding_up(sqrt_price, liquidity, amount_in)
    return _next_sqrt_price_from_amount1_rounding_down(sqrt_price, liquidity, amount_in)


# ---------------------------------------------------------------------------
# SwapMath
# ---------------------------------------------------------------------------

def compute_swap_step(sqrt_current: int, sqrt_target: int, liquidity: int, amount_remaining: int, fee_pips: int):
    """
    One exact-input swap step toward sqrt_target.

    Returns:
        (sqrt_next, amount_in, amount_out, fee_amount); sqrt_next == sqrt_target
        means the input was large enough to reach the target price.
    """
    zero_for_one = sqrt_current >= sqrt_target

    amount_remaining_less_fee = mul_div(amount_remaining, FEE_DENOMINATOR - fee_pips, FEE_DENOMINATOR)
    if zero_for_one:
        amount_in = get_amount0_delta(sqrt_target, sqrt_current, liquidity, True)
    else:
        amount_in = get_amount1_delta(sqrt_current, sqrt_target, liquidity, True)

    if amount_remaining_less_fee >= amount_in:
        sqrt_next = sqrt_target
    else:
        sqrt_next = get_next_sqrt_price_from_input(
            sqrt_current, liquidity, amount_remaining_less_fee, zero_for_one
        )

    reached_target = sqrt_next == sqrt_target

    if zero_for_one:
        if not reached_target:
            amount_in = get_amount0_delta(sqrt_next, sqrt_current, liquidity, True)
        amount_out = get_amount1_delta(sqrt_next, sqrt_current, liquidity, False)
    else:
        if not reached_target:
            amount_in = get_amount1_delta(sqrt_current, sqrt_next, liquidity, True)
        amount_out = get_amount0_delta(sqrt_current, sqrt_next, liquidity, False)

    if reached_target:
        fee_amount = mul_div_rounding_up(amount_in, fee_pips, FEE_DENOMINATOR - fee_pips)
    else:
        fee_amount = amount_remaining - amount_in

    return sqrt_next, amount_in, amount_out, fee_amount


# ---------------------------------------------------------------------------
# Display helpers (float)
# ---------------------------------------------------------------------------

def tick_to_price(tick, decimals0, decimals1):
    """
    Convert tick to human-readable price.

    Returns:
        Price as token1/token0
    """
    return (1.0001 ** tick) * (10 ** decimals0) / (10 ** decimals1)


def sqrt_price_x96_to_price(sqrt_price_x96, decimals0, decimals1):
    """Convert sqrtPriceX96 to human-readable price"""
    price = (sqrt_price_x96 / Q96) ** 2
    return price * (10 ** decimals0) / (10 ** decimals1)
