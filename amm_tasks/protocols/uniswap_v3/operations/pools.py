"""Pool creation for Uniswap V3"""

import logging

from ....contracts.erc20 import ERC20
from ....core.connection import Web3Manager
from ....core.exceptions import ConfigError, PoolNotFound
from ...base import BasePoolManager
from ..config import UniswapV3Config
from ..contracts.factory import Factory
from ..contracts.nfpm import NFPM
from ..math import encode_price_ratio, sqrt_price_x96_to_price, tick_at_sqrt_price

logger = logging.getLogger(__name__)


def order_pair(token0, token1, amount0, amount1):
    """Sort tokens by address, carrying the amounts along"""
    if int(token0, 16) > int(token1, 16):
        return token1, token0, amount1, amount0, True
    return token0, token1, amount0, amount1, False


class PoolManager(BasePoolManager):
    """Create and initialize Uniswap V3 pools through the position manager"""

    def __init__(self, manager=None, nfpm_address=None):
        """
        Args:
            manager: Web3Manager instance (created with signer if None)
            nfpm_address: NonfungiblePositionManager (deployment.json if None)
        """
        self.manager = manager or Web3Manager(require_signer=True)
        self.config = UniswapV3Config()
        address = self.config.get_contract_address(self.manager.chain_id, "nfpm", nfpm_address)
        self.nfpm = NFPM(self.manager, address)

    def create_pool(self, token0, token1, fee, amount0, amount1):
        """
        Create a pool whose initial price is amount1/amount0 (smallest units).

        Returns:
            Dict with pool address, sqrtPriceX96 and initial tick
        """
        spacing = self.config.get_tick_spacing(fee)
        token0 = self.manager.checksum(self.config.get_token_address(token0))
        token1 = self.manager.checksum(self.config.get_token_address(token1))
        token0, token1, amount0, amount1, swapped = order_pair(token0, token1, int(amount0), int(amount1))
        if swapped:
            logger.info("Token order swapped so that token0 < token1")

        factory = Factory(self.manager, self.nfpm.factory())
        enabled_spacing = factory.fee_amount_tick_spacing(fee)
        if enabled_spacing != spacing:
            raise ConfigError(
                f"Factory spacing for fee {fee} is {enabled_spacing}, expected {spacing}",
                factory=factory.address,
            )

        sqrt_price_x96 = encode_price_ratio(amount1, amount0)
        symbol0 = ERC20(self.manager, token0).symbol
        symbol1 = ERC20(self.manager, token1).symbol
        logger.info("Create pool %s/%s fee %s at sqrtPriceX96 %s", symbol0, symbol1, fee, sqrt_price_x96)

        receipt = self.nfpm.create_and_initialize_pool_if_necessary(token0, token1, fee, sqrt_price_x96)

        pool_address = factory.get_pool(token0, token1, fee)
        if pool_address is None:
            raise PoolNotFound(
                "Pool missing after createAndInitializePoolIfNecessary",
                token0=token0, token1=token1, fee=fee,
            )

        return {
            "pool": pool_address,
            "token0": {"address": token0, "symbol": symbol0, "amount": amount0},
            "token1": {"address": token1, "symbol": symbol1, "amount": amount1},
            "fee": fee,
            "sqrt_price_x96": sqrt_price_x96,
            "tick": tick_at_sqrt_price(sqrt_price_x96),
            "raw_price": sqrt_price_x96_to_price(sqrt_price_x96, 0, 0),
            "tx_hash": receipt["transactionHash"].hex(),
        }
