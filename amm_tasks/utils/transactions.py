"""Transaction utilities with EIP-1559 support"""

import logging

from ..core.exceptions import TransactionError
from .gas import GasManager

logger = logging.getLogger(__name__)


class TransactionBuilder:
    """Build, sign and send EIP-1559 transactions, one at a time"""

    def __init__(self, manager, gas_manager=None):
        """
        Args:
            manager: Web3Manager instance (must have a signer to send)
            gas_manager: GasManager instance (created if None)
        """
        self.manager = manager
        self.gas_manager = gas_manager or GasManager(manager)

    def _base_tx(self, gas_limit, value=0):
        tx = {
            "from": self.manager.address,
            "nonce": self.manager.get_nonce(),
            "gas": gas_limit,
            "chainId": self.manager.chain_id,
            "type": 2,
        }
        tx.update(self.gas_manager.getGasParams())
        if value > 0:
            tx["value"] = value
        return tx

    def build(self, contract_func, operation_type=None, gas_buffer=1.2, value=0):
        """
        Build a transaction for a contract function (or constructor).

        Args:
            contract_func: Bound contract function / constructor
            operation_type: Operation name for fallback gas limits
            gas_buffer: Multiplier for the gas estimate
            value: ETH value in wei
        """
        call = {"from": self.manager.address}
        if value > 0:
            call["value"] = value
        estimated = self.gas_manager.estimateGas(lambda: contract_func.estimate_gas(call), operation_type)
        return contract_func.build_transaction(self._base_tx(int(estimated * gas_buffer), value))

    def build_raw(self, to, data, operation_type=None, gas_buffer=1.2, value=0):
        """Build a transaction carrying pre-encoded calldata"""
        to = self.manager.checksum(to)
        call = {"from": self.manager.address, "to": to, "data": data, "value": value}
        estimated = self.gas_manager.estimateGas(
            lambda: self.manager.w3.eth.estimate_gas(call), operation_type
        )
        tx = self._base_tx(int(estimated * gas_buffer), value)
        tx.update({"to": to, "data": data})
        return tx

    def send(self, tx, operation_type=None):
        """Sign, send and wait for the receipt; a failed status raises TransactionError"""
        if self.manager.account is None:
            raise TransactionError("No signing account configured")

        signed = self.manager.account.sign_transaction(tx)
        tx_hash = self.manager.w3.eth.send_raw_transaction(signed.raw_transaction)
        logger.info("Sent %s tx %s", operation_type or "transaction", tx_hash.hex())

        receipt = self.manager.w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt["status"] != 1:
            raise TransactionError(
                f"{operation_type or 'Transaction'} failed",
                tx_hash=tx_hash.hex(),
                block=receipt.get("blockNumber"),
            )
        return receipt

    def build_and_send(self, contract_func, operation_type=None, gas_buffer=1.2, value=0):
        """Build, sign and send a contract call; returns the receipt"""
        tx = self.build(contract_func, operation_type, gas_buffer, value)
        return self.send(tx, operation_type)

    def send_raw(self, to, data, operation_type=None, gas_buffer=1.2, value=0):
        """Build, sign and send pre-encoded calldata; returns the receipt"""
        tx = self.build_raw(to, data, operation_type, gas_buffer, value)
        return self.send(tx, operation_type)
