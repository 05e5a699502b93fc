"""Token swap operations for Uniswap V3"""

import logging

from ....contracts.erc20 import ERC20
from ....core.connection import Web3Manager
from ...base import BaseSwapManager
from ..config import UniswapV3Config
from ..contracts.router import SwapRouter
from ..snapshot import Web3PoolDataSource, fetch
from ..trade import TradeBuilder
from ..types import (
    ADDRESS_ZERO,
    DEFAULT_DEADLINE_MINUTES,
    DEFAULT_SLIPPAGE,
    FeeTier,
    PoolIdentity,
    TradeRequest,
)

logger = logging.getLogger(__name__)


class SwapManager(BaseSwapManager):
    """Execute exact-input swaps through a single Uniswap V3 pool"""

    def __init__(self, manager=None, router_address=None, factory_address=None, require_signer=True):
        """
        Args:
            manager: Web3Manager instance (created if None)
            router_address: SwapRouter (deployment.json if None)
            factory_address: Factory used to locate pools (deployment.json if None)
            require_signer: If True, require a signing account
        """
        self.manager = manager or Web3Manager(require_signer=require_signer)
        self.config = UniswapV3Config()
        chain_id = self.manager.chain_id
        self.router = SwapRouter(
            self.manager, self.config.get_contract_address(chain_id, "router", router_address)
        )
        self.factory_address = factory_address or self.config.get_contracts(chain_id).get("factory")
        self.data_source = Web3PoolDataSource(self.manager, self.factory_address)
        self.trade_builder = TradeBuilder(self.router.address)

    def _build(self, token_in, token_out, amount_in, fee, slippage, deadline_minutes, pool_address, recipient):
        erc20_in = ERC20(self.manager, self.config.get_token_address(token_in))
        erc20_out = ERC20(self.manager, self.config.get_token_address(token_out))
        input_token = erc20_in.to_token()
        output_token = erc20_out.to_token()

        request = TradeRequest.create(
            input_token=input_token,
            output_token=output_token,
            input_amount=amount_in,
            recipient=recipient or self.manager.address,
            slippage_tolerance=slippage,
            deadline_minutes=deadline_minutes,
        )
        identity = PoolIdentity(
            token_a=input_token,
            token_b=output_token,
            fee=fee,
            factory=self.factory_address,
            address=pool_address,
        )
        snapshot = fetch(identity, self.data_source)
        instruction = self.trade_builder.build(snapshot, request)
        return erc20_in, erc20_out, request, instruction

    @staticmethod
    def _summary(erc20_in, erc20_out, request, instruction):
        return {
            "pool": instruction.pool_address,
            "fee": instruction.fee,
            "token_in": {
                "symbol": erc20_in.symbol,
                "address": instruction.token_in,
                "amount": instruction.amount_in,
                "formatted": erc20_in.format(instruction.amount_in),
            },
            "token_out": {
                "symbol": erc20_out.symbol,
                "address": instruction.token_out,
                "expected_amount": instruction.expected_amount_out,
                "min_amount": instruction.amount_out_minimum,
                "formatted": erc20_out.format(instruction.expected_amount_out),
            },
            "slippage": str(request.slippage_tolerance),
            "deadline": instruction.deadline,
            "recipient": instruction.recipient,
            "calldata": instruction.calldata_hex,
        }

    def quote(self, token_in, token_out, amount_in, fee=FeeTier.MEDIUM, slippage=DEFAULT_SLIPPAGE,
              deadline_minutes=DEFAULT_DEADLINE_MINUTES, pool_address=None, recipient=None, **kwargs):
        """
        Build the swap against a fresh snapshot without sending anything.

        Without a recipient or a known wallet address the calldata pays the
        zero address; it is only meant for inspection then.

        Returns:
            Dict with expected and minimum output plus the calldata
        """
        recipient = recipient or self.manager.address or ADDRESS_ZERO
        erc20_in, erc20_out, request, instruction = self._build(
            token_in, token_out, amount_in, fee, slippage, deadline_minutes, pool_address, recipient
        )
        return self._summary(erc20_in, erc20_out, request, instruction)

    def swap(self, token_in, token_out, amount_in, fee=FeeTier.MEDIUM, slippage=DEFAULT_SLIPPAGE,
             deadline_minutes=DEFAULT_DEADLINE_MINUTES, pool_address=None, recipient=None,
             dry_run=False, **kwargs):
        """
        Swap an exact amount of token_in for token_out.

        Args:
            token_in: Token to send (symbol or address)
            token_out: Token to receive (symbol or address)
            amount_in: Amount of token_in in its smallest unit
            fee: Pool fee tier
            slippage: Fraction, e.g. Fraction(1, 1000) for 0.1%
            deadline_minutes: Deadline offset from now
            pool_address: Explicit pool address (resolved from the factory if None)
            recipient: Output recipient (signer if None)
            dry_run: Build and return the instruction without sending

        Returns:
            Dict with transaction details and amounts
        """
        erc20_in, erc20_out, request, instruction = self._build(
            token_in, token_out, amount_in, fee, slippage, deadline_minutes, pool_address, recipient
        )
        result = self._summary(erc20_in, erc20_out, request, instruction)
        if dry_run:
            result["dry_run"] = True
            return result

        erc20_in.approve(self.router.address, instruction.amount_in)
        receipt = self.router.execute(instruction)

        result.update({
            "tx_hash": receipt["transactionHash"].hex(),
            "block": receipt["blockNumber"],
            "gas_used": receipt["gasUsed"],
        })
        return result
