"""Uniswap V3 contract wrappers"""

from .factory import Factory
from .nfpm import NFPM
from .pool import Pool
from .router import SwapRouter

__all__ = ["Factory", "NFPM", "Pool", "SwapRouter"]
