"""Uniswap V3 operations"""

from .deploy import ArtifactStore, DeploymentOrchestrator
from .liquidity import LiquidityManager
from .pools import PoolManager
from .swap import SwapManager

__all__ = ["ArtifactStore", "DeploymentOrchestrator", "LiquidityManager", "PoolManager", "SwapManager"]
