"""Uniswap V3 specific configuration"""

import logging
from enum import IntEnum

from ...core.config import Config
from ...core.exceptions import ConfigError, UnsupportedFeeTier

logger = logging.getLogger(__name__)


class FeeTier(IntEnum):
    """Pool fee in hundredths of a basis point"""

    LOW = 500
    MEDIUM = 3000
    HIGH = 10000


# Fee tier to tick spacing mapping
TICK_SPACINGS = {
    FeeTier.LOW: 10,
    FeeTier.MEDIUM: 60,
    FeeTier.HIGH: 200,
}


def spacing_for(fee):
    """
    Tick spacing for a fee tier.

    Raises:
        UnsupportedFeeTier: fee is not one of 500, 3000, 10000
    """
    try:
        return TICK_SPACINGS[FeeTier(fee)]
    except (ValueError, TypeError):
        raise UnsupportedFeeTier(
            f"Invalid fee tier: {fee}. Valid: {[int(f) for f in TICK_SPACINGS]}",
            fee=fee,
        ) from None


class UniswapV3Config:
    """Configuration manager for Uniswap V3 protocol"""

    _instance = None

    # Per-chain addresses written by the deploy command
    DEPLOYMENT_FILE = "deployment.json"

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        self._shared_config = Config()

    def get_contracts(self, chain_id):
        """Get contract addresses for a specific chain"""
        deployments = self._shared_config.read_json(self.DEPLOYMENT_FILE, default={})
        return deployments.get(str(chain_id), {})

    def save_contracts(self, chain_id, addresses):
        """Merge addresses for a chain into deployment.json"""
        deployments = self._shared_config.read_json(self.DEPLOYMENT_FILE, default={})
        entry = deployments.get(str(chain_id), {})
        entry.update({k: v for k, v in addresses.items() if v})
        deployments[str(chain_id)] = entry
        path = self._shared_config.write_json(self.DEPLOYMENT_FILE, deployments)
        logger.info("Saved chain %s deployment to %s", chain_id, path)
        return path

    def get_contract_address(self, chain_id, key, override=None):
        """
        Address of a deployed contract, preferring an explicit override.

        Raises:
            ConfigError: nothing recorded for this chain and no override
        """
        if override:
            return override
        address = self.get_contracts(chain_id).get(key)
        if not address:
            raise ConfigError(
                f"No '{key}' address for chain {chain_id}. "
                f"Pass it explicitly or run `amm-tasks deploy` first."
            )
        return address

    @property
    def common_tokens(self):
        """Delegate to shared config for common tokens"""
        return self._shared_config.common_tokens

    def get_token_address(self, symbol_or_address):
        """Delegate to shared config for token resolution"""
        return self._shared_config.get_token_address(symbol_or_address)

    def get_tick_spacing(self, fee):
        """Get tick spacing for fee tier"""
        return spacing_for(fee)
