"""Uniswap V3 protocol implementation"""

from .config import FeeTier, UniswapV3Config, spacing_for
from .contracts import NFPM, Factory, Pool, SwapRouter
from .operations import DeploymentOrchestrator, LiquidityManager, PoolManager, SwapManager
from .snapshot import PoolDataSource, Web3PoolDataSource, fetch
from .trade import TradeBuilder

__all__ = [
    "FeeTier",
    "UniswapV3Config",
    "spacing_for",
    "NFPM",
    "Factory",
    "Pool",
    "SwapRouter",
    "DeploymentOrchestrator",
    "LiquidityManager",
    "PoolManager",
    "SwapManager",
    "PoolDataSource",
    "Web3PoolDataSource",
    "fetch",
    "TradeBuilder",
]
