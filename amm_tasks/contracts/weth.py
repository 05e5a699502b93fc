"""WETH9 (Wrapped ETH) contract wrapper"""

from .erc20 import ERC20


class WETH(ERC20):
    """WETH9 wrapper with deposit support, used to seed test liquidity"""

    ABI_NAME = "weth"

    def deposit(self, amount_wei):
        """
        Wrap ETH to WETH.

        Args:
            amount_wei: Amount of ETH to wrap, in wei
        """
        if amount_wei <= 0:
            raise ValueError(f"Deposit amount must be positive, got {amount_wei}")
        return self.tx_builder.build_and_send(
            self.contract.functions.deposit(),
            operation_type="deposit",
            value=amount_wei,
        )
