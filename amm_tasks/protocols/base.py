"""Abstract base classes for AMM protocol operations"""

from abc import ABC, abstractmethod
from typing import Dict, Any


class BasePoolManager(ABC):
    """Abstract base class for pool bootstrap operations"""

    @abstractmethod
    def create_pool(self, token0: str, token1: str, fee: int, amount0: int, amount1: int) -> Dict[str, Any]:
        """
        Create and initialize a pool at the price amount1/amount0.

        Returns:
            Dict containing the pool address and initial price
        """
        pass


class BaseLiquidityManager(ABC):
    """Abstract base class for liquidity management operations"""

    @abstractmethod
    def add_liquidity(self, **kwargs) -> Dict[str, Any]:
        """
        Add liquidity to a pool.

        Returns:
            Dict containing transaction details and position info
        """
        pass


class BaseSwapManager(ABC):
    """Abstract base class for swap operations"""

    @abstractmethod
    def swap(self, token_in: str, token_out: str, amount_in: int, **kwargs) -> Dict[str, Any]:
        """
        Execute a token swap.

        Args:
            token_in: Input token symbol or address
            token_out: Output token symbol or address
            amount_in: Amount of input token in its smallest unit

        Returns:
            Dict containing transaction details and swap results
        """
        pass

    @abstractmethod
    def quote(self, token_in: str, token_out: str, amount_in: int, **kwargs) -> Dict[str, Any]:
        """
        Build the swap without executing it.

        Returns:
            Dict containing expected output and the minimum accepted output
        """
        pass
