"""Liquidity provisioning for Uniswap V3"""

import logging

from ....contracts.erc20 import ERC20
from ....core.connection import Web3Manager
from ...base import BaseLiquidityManager
from ..config import UniswapV3Config
from ..contracts.nfpm import NFPM
from ..math import tick_to_price
from ..position import range_for_price_ratio
from ..types import DEFAULT_DEADLINE_MINUTES, MintParams
from .pools import order_pair

logger = logging.getLogger(__name__)


class LiquidityManager(BaseLiquidityManager):
    """Mint Uniswap V3 positions one tick spacing around the target price"""

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

    def build_mint_params(self, token0, token1, fee, amount0, amount1,
                          amount0_min=0, amount1_min=0,
                          deadline_minutes=DEFAULT_DEADLINE_MINUTES, recipient=None):
        """
        MintParams for a position centred on the price amount1/amount0.

        Token order is normalised (token0 < token1) with amounts and minimums
        swapped along with the tokens.
        """
        token0 = self.manager.checksum(self.config.get_token_address(token0))
        token1 = self.manager.checksum(self.config.get_token_address(token1))
        token0, token1, amount0, amount1, swapped = order_pair(token0, token1, int(amount0), int(amount1))
        if swapped:
            amount0_min, amount1_min = amount1_min, amount0_min

        position_range = range_for_price_ratio(amount0, amount1, fee)
        return MintParams.create(
            token0=token0,
            token1=token1,
            fee=fee,
            position_range=position_range,
            amount0_desired=amount0,
            amount1_desired=amount1,
            amount0_min=amount0_min,
            amount1_min=amount1_min,
            recipient=recipient or self.manager.address,
            deadline_minutes=deadline_minutes,
        )

    def add_liquidity(self, token0, token1, fee, amount0, amount1,
                      amount0_min=0, amount1_min=0,
                      deadline_minutes=DEFAULT_DEADLINE_MINUTES, recipient=None):
        """
        Approve both tokens and mint a position.

        Args:
            token0, token1: Token symbols or addresses
            fee: Fee tier (500, 3000, 10000)
            amount0, amount1: Desired amounts in smallest units; their ratio sets the range
            amount0_min, amount1_min: Minimum amounts the mint must use
            deadline_minutes: Deadline offset from now
            recipient: Position NFT owner (signer if None)

        Returns:
            Dict with token id, ticks and amounts
        """
        params = self.build_mint_params(
            token0, token1, fee, amount0, amount1,
            amount0_min, amount1_min, deadline_minutes, recipient,
        )
        logger.info("Mint params: %s", params)

        erc20_0 = ERC20(self.manager, params.token0)
        erc20_1 = ERC20(self.manager, params.token1)
        erc20_0.approve(self.nfpm.address, params.amount0_desired)
        erc20_1.approve(self.nfpm.address, params.amount1_desired)

        result = self.nfpm.mint(params)

        return {
            "token_id": result["token_id"],
            "tx_hash": result["receipt"]["transactionHash"].hex(),
            "token0": {"address": params.token0, "symbol": erc20_0.symbol, "amount": result["amount0"]},
            "token1": {"address": params.token1, "symbol": erc20_1.symbol, "amount": result["amount1"]},
            "fee": params.fee,
            "tick_lower": params.tick_lower,
            "tick_upper": params.tick_upper,
            "price_lower": tick_to_price(params.tick_lower, erc20_0.decimals, erc20_1.decimals),
            "price_upper": tick_to_price(params.tick_upper, erc20_0.decimals, erc20_1.decimals),
            "liquidity": result["liquidity"],
            "deadline": params.deadline,
        }
