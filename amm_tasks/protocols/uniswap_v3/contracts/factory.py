"""Uniswap V3 Factory contract wrapper"""

from ..types import ADDRESS_ZERO


class Factory:
    """Wrapper for UniswapV3Factory lookups"""

    def __init__(self, manager, address):
        self.manager = manager
        self.address = manager.checksum(address)
        self.contract = manager.get_contract(self.address, "factory")

    def get_pool(self, token_a, token_b, fee):
        """Pool address for a token pair and fee, or None if not created"""
        address = self.contract.functions.getPool(
            self.manager.checksum(token_a),
            self.manager.checksum(token_b),
            int(fee),
        ).call()
        if int(address, 16) == int(ADDRESS_ZERO, 16):
            return None
        return self.manager.checksum(address)

    def fee_amount_tick_spacing(self, fee):
        """Spacing the factory has enabled for a fee (0 = not enabled)"""
        return self.contract.functions.feeAmountTickSpacing(int(fee)).call()
