"""Contract wrappers for ERC20 and WETH9 interactions"""

from .erc20 import ERC20
from .weth import WETH

__all__ = ["ERC20", "WETH"]
