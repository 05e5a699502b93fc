"""Position range selection around the current price"""

import logging

from ...core.exceptions import InvalidSpacing
from .config import spacing_for
from .math import encode_price_ratio, nearest_usable_tick, tick_at_sqrt_price
from .types import PositionRange

logger = logging.getLogger(__name__)


def range_around(target_tick, spacing):
    """
    One-spacing band on each side of the usable tick nearest to target_tick.

    Args:
        target_tick: Tick of the price to centre on
        spacing: Pool tick spacing

    Returns:
        PositionRange(nearest - spacing, nearest + spacing)

    Raises:
        InvalidSpacing: spacing <= 0
    """
    if spacing <= 0:
        raise InvalidSpacing(f"Tick spacing must be positive, got {spacing}")
    centre = nearest_usable_tick(target_tick, spacing)
    return PositionRange(tick_lower=centre - spacing, tick_upper=centre + spacing)


def range_for_price_ratio(amount0, amount1, fee):
    """Range around the price implied by amount1/amount0 for a fee tier"""
    spacing = spacing_for(fee)
    sqrt_price_x96 = encode_price_ratio(amount1, amount0)
    tick = tick_at_sqrt_price(sqrt_price_x96)
    position_range = range_around(tick, spacing)
    logger.debug(
        "Ratio %s/%s -> sqrtPriceX96 %s, tick %s, range [%s, %s]",
        amount1, amount0, sqrt_price_x96, tick,
        position_range.tick_lower, position_range.tick_upper,
    )
    return position_range
