"""Pool state snapshots built from live queries"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from ...core.exceptions import PoolNotFound, StaleQuery
from .contracts.factory import Factory
from .contracts.pool import Pool
from .encoding import compute_pool_address
from .math import MAX_SQRT_RATIO, MAX_TICK, nearest_usable_tick, sqrt_price_at_tick
from .types import PoolIdentity, PoolSnapshot, TickInfo

logger = logging.getLogger(__name__)


class PoolDataSource(ABC):
    """Read-only access to pool state"""

    @abstractmethod
    def resolve_pool(self, pool: PoolIdentity) -> Optional[str]:
        """Pool contract address, or None when it does not exist"""
        pass

    @abstractmethod
    def slot0(self, address: str) -> Tuple[int, int]:
        """(sqrtPriceX96, tick)"""
        pass

    @abstractmethod
    def liquidity(self, address: str) -> int:
        pass

    @abstractmethod
    def ticks(self, address: str, index: int) -> TickInfo:
        pass


class Web3PoolDataSource(PoolDataSource):
    """
    PoolDataSource backed by web3 contract calls.

    Resolution order: explicit address, CREATE2 address from the factory,
    then factory.getPool (covers factories built from non-canonical bytecode).
    """

    def __init__(self, manager, factory_address=None):
        self.manager = manager
        self.factory_address = factory_address

    def resolve_pool(self, pool):
        if pool.address:
            return pool.address if self.manager.has_code(pool.address) else None

        factory = pool.factory or self.factory_address
        if not factory:
            return None

        token0, token1 = pool.tokens
        candidate = compute_pool_address(factory, token0.address, token1.address, pool.fee)
        if self.manager.has_code(candidate):
            return candidate

        logger.debug("No code at CREATE2 address %s, asking factory %s", candidate, factory)
        address = Factory(self.manager, factory).get_pool(token0.address, token1.address, pool.fee)
        if address and self.manager.has_code(address):
            return address
        return None

    def slot0(self, address):
        return Pool(self.manager, address).slot0()

    def liquidity(self, address):
        return Pool(self.manager, address).liquidity

    def ticks(self, address, index):
        gross, net = Pool(self.manager, address).ticks(index)
        return TickInfo(liquidity_net=net, liquidity_gross=gross)


def fetch(pool, source):
    """
    Snapshot a pool's tradable state.

    Only the usable tick nearest the current tick is captured; trades built
    on the snapshot must stay inside the current spacing band.

    Args:
        pool: PoolIdentity
        source: PoolDataSource

    Raises:
        PoolNotFound: address unresolved or pool not initialized
        StaleQuery: slot0 tick does not bracket slot0 price
    """
    address = source.resolve_pool(pool)
    if not address:
        token0, token1 = pool.tokens
        raise PoolNotFound(
            "Pool could not be resolved",
            token0=token0.address, token1=token1.address, fee=pool.fee,
        )

    sqrt_price_x96, tick = source.slot0(address)
    if sqrt_price_x96 == 0:
        raise PoolNotFound("Pool is not initialized", pool=address)

    liquidity = source.liquidity(address)

    lower = sqrt_price_at_tick(tick)
    upper = sqrt_price_at_tick(tick + 1) if tick < MAX_TICK else MAX_SQRT_RATIO
    # A downward swap ending on a tick leaves tick one below it, price on it
    if not lower <= sqrt_price_x96 <= upper:
        raise StaleQuery(
            "Pool tick does not bracket its sqrt price",
            pool=address, tick=tick, sqrt_price_x96=sqrt_price_x96,
        )

    index = nearest_usable_tick(tick, pool.tick_spacing)
    tick_info = source.ticks(address, index)

    token0, token1 = pool.tokens
    snapshot = PoolSnapshot(
        address=address,
        token0=token0,
        token1=token1,
        fee=int(pool.fee),
        sqrt_price_x96=sqrt_price_x96,
        liquidity=liquidity,
        current_tick=tick,
        ticks={index: tick_info},
    )
    logger.debug("Snapshot %s: tick %s, liquidity %s", address, tick, liquidity)
    return snapshot
