"""Protocol implementations for different AMM platforms"""

from .base import (
    BasePoolManager,
    BaseLiquidityManager,
    BaseSwapManager,
)

__all__ = [
    "BasePoolManager",
    "BaseLiquidityManager",
    "BaseSwapManager",
]
