"""Uniswap V3 NonfungiblePositionManager contract wrapper"""

import logging

from ....core.exceptions import TransactionError
from ....utils.transactions import TransactionBuilder

logger = logging.getLogger(__name__)


class NFPM:
    """Wrapper for NonfungiblePositionManager interactions"""

    def __init__(self, manager, address, tx_builder=None):
        """
        Args:
            manager: Web3Manager instance
            address: NonfungiblePositionManager address
            tx_builder: TransactionBuilder (created if None)
        """
        self.manager = manager
        self.address = manager.checksum(address)
        self.contract = manager.get_contract(self.address, "nfpm")
        self.tx_builder = tx_builder or TransactionBuilder(manager)

    def factory(self):
        """Factory the position manager was deployed against"""
        return self.contract.functions.factory().call()

    def create_and_initialize_pool_if_necessary(self, token0, token1, fee, sqrt_price_x96):
        """
        Create the pool (if missing) and initialize it at sqrt_price_x96.

        Returns:
            Transaction receipt
        """
        contract_func = self.contract.functions.createAndInitializePoolIfNecessary(
            self.manager.checksum(token0),
            self.manager.checksum(token1),
            int(fee),
            int(sqrt_price_x96),
        )
        return self.tx_builder.build_and_send(contract_func, operation_type="createPool")

    def mint(self, params, gas_buffer=1.2):
        """
        Mint new liquidity position.

        Args:
            params: MintParams
            gas_buffer: multiplier for gas estimate

        Returns:
            {"receipt": receipt, "token_id": int}
        """
        contract_func = self.contract.functions.mint(params.to_tuple())
        receipt = self.tx_builder.build_and_send(
            contract_func,
            operation_type="mint",
            gas_buffer=gas_buffer,
        )

        events = self.contract.events.IncreaseLiquidity().process_receipt(receipt)
        if not events:
            raise TransactionError(
                "Mint succeeded but emitted no IncreaseLiquidity event",
                tx_hash=receipt["transactionHash"].hex(),
            )
        args = events[0]["args"]
        logger.info(
            "Minted position %s (liquidity %s, amount0 %s, amount1 %s)",
            args["tokenId"], args["liquidity"], args["amount0"], args["amount1"],
        )
        return {
            "receipt": receipt,
            "token_id": args["tokenId"],
            "liquidity": args["liquidity"],
            "amount0": args["amount0"],
            "amount1": args["amount1"],
        }
