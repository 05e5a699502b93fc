"""ERC20 token contract wrapper"""

import logging

from ..core.exceptions import ApprovalFailed, TransactionError, TransferFailed
from ..utils.transactions import TransactionBuilder

logger = logging.getLogger(__name__)


class ERC20:
    """Wrapper for ERC20 token interactions; amounts are always in the smallest unit"""

    ABI_NAME = "erc20"

    def __init__(self, manager, address, tx_builder=None):
        """
        Args:
            manager: Web3Manager instance
            address: Token contract address
            tx_builder: TransactionBuilder (created if None)
        """
        self.manager = manager
        self.address = manager.checksum(address)
        self.contract = manager.get_contract(self.address, self.ABI_NAME)
        self.tx_builder = tx_builder or TransactionBuilder(manager)
        self._decimals = None
        self._symbol = None

    @property
    def decimals(self):
        """Token decimals as reported by the contract (cached per wrapper)"""
        if self._decimals is None:
            self._decimals = self.contract.functions.decimals().call()
        return self._decimals

    @property
    def symbol(self):
        """Token symbol, handling bytes32 symbols (MKR, SAI)"""
        if self._symbol is None:
            raw = self.contract.functions.symbol().call()
            if isinstance(raw, bytes):
                raw = raw.rstrip(b"\x00").decode("utf-8")
            self._symbol = raw
        return self._symbol

    def to_token(self):
        """Token value object for this contract"""
        from ..protocols.uniswap_v3.types import Token

        return Token(
            address=self.address,
            decimals=self.decimals,
            chain_id=self.manager.chain_id,
            symbol=self.symbol,
        )

    def balance_of(self, address=None):
        addr = address or self.manager.address
        return self.contract.functions.balanceOf(addr).call()

    def allowance(self, spender, owner=None):
        owner_addr = owner or self.manager.address
        return self.contract.functions.allowance(owner_addr, spender).call()

    def format(self, amount):
        """Human-readable amount, for display only"""
        return f"{amount / (10 ** self.decimals):.6f} {self.symbol}"

    def approve(self, spender, amount):
        """
        Approve spender for amount. Returns receipt, or None if already approved.

        Raises:
            ApprovalFailed: the approve transaction reverted
        """
        spender = self.manager.checksum(spender)
        if self.allowance(spender) >= amount:
            logger.debug("%s allowance for %s already covers %s", self.address, spender, amount)
            return None

        logger.info("Approving %s to spend %s of %s", spender, amount, self.address)
        try:
            return self.tx_builder.build_and_send(
                self.contract.functions.approve(spender, amount),
                operation_type="approve",
            )
        except TransactionError as e:
            raise ApprovalFailed(
                f"Approval of {self.address} failed: {e.message}",
                spender=spender, amount=amount, **e.context
            ) from e

    def transfer(self, to, amount):
        """
        Transfer amount to address.

        Raises:
            TransferFailed: the transfer transaction reverted
        """
        to = self.manager.checksum(to)
        try:
            return self.tx_builder.build_and_send(
                self.contract.functions.transfer(to, amount),
                operation_type="transfer",
            )
        except TransactionError as e:
            raise TransferFailed(
                f"Transfer of {self.address} failed: {e.message}",
                to=to, amount=amount, **e.context
            ) from e
