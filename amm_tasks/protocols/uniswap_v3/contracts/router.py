"""Uniswap V3 SwapRouter wrapper"""

import logging

from ....core.exceptions import ExpiredDeadline, StalePrice, TransactionError
from ....utils.transactions import TransactionBuilder

logger = logging.getLogger(__name__)

# Router revert strings
TOO_LITTLE_RECEIVED = "Too little received"
TRANSACTION_TOO_OLD = "Transaction too old"


class SwapRouter:
    """Submits pre-built swap calldata to the SwapRouter"""

    def __init__(self, manager, address, tx_builder=None):
        self.manager = manager
        self.address = manager.checksum(address)
        self.tx_builder = tx_builder or TransactionBuilder(manager)

    def execute(self, instruction):
        """
        Send a SwapInstruction and wait for the receipt.

        Raises:
            StalePrice: the pool moved and the output fell below the minimum
            ExpiredDeadline: the router rejected the deadline
            TransactionError: any other failure
        """
        if self.manager.checksum(instruction.router) != self.address:
            raise ValueError(f"Instruction targets router {instruction.router}, not {self.address}")

        try:
            return self.tx_builder.send_raw(
                self.address,
                instruction.calldata_hex,
                operation_type="swap",
                value=instruction.value,
            )
        except TransactionError as e:
            context = dict(
                e.context,
                pool=instruction.pool_address,
                amount_in=instruction.amount_in,
                amount_out_minimum=instruction.amount_out_minimum,
                deadline=instruction.deadline,
            )
            reason = e.context.get("reason") or ""
            if TOO_LITTLE_RECEIVED in reason:
                raise StalePrice("Pool price moved past the slippage bound", **context) from e
            if TRANSACTION_TOO_OLD in reason:
                raise ExpiredDeadline("Router rejected the swap deadline", **context) from e
            raise TransactionError(e.message, **context) from e
