"""Uniswap V3 Pool contract wrapper"""


class Pool:
    """
    Read-only wrapper for Uniswap V3 Pool state.

    Every accessor queries the chain; nothing is cached, so two calls may
    observe different states if a transaction lands in between.
    """

    def __init__(self, manager, address):
        """
        Args:
            manager: Web3Manager instance
            address: Pool contract address
        """
        self.manager = manager
        self.address = manager.checksum(address)
        self.contract = manager.get_contract(self.address, "pool")

    def slot0(self):
        """
        Current price state.

        Returns:
            (sqrtPriceX96, tick)
        """
        result = self.contract.functions.slot0().call()
        return result[0], result[1]

    @property
    def liquidity(self):
        """In-range liquidity"""
        return self.contract.functions.liquidity().call()

    def ticks(self, tick):
        """
        Liquidity recorded at a tick.

        Returns:
            (liquidityGross, liquidityNet)
        """
        result = self.contract.functions.ticks(tick).call()
        return result[0], result[1]
