"""EIP-1559 Gas management with user-configurable limits"""

import logging

from web3.exceptions import ContractLogicError

from ..core.config import Config
from ..core.exceptions import TransactionError

logger = logging.getLogger(__name__)


class GasPriceTooHighError(TransactionError):
    """Raised when current base fee exceeds the user-specified maximum"""
    pass


class GasConfig:
    """Gas configuration from gas_config.json in the config directory"""

    DEFAULT_GAS_LIMITS = {
        "approve": 65000,
        "deposit": 50000,
        "deploy": 6000000,
        "createPool": 5000000,
        "mint": 500000,
        "swap": 200000,
        "default": 500000,
    }

    def __init__(self, data=None):
        """
        Args:
            data: Parsed config dict (read from gas_config.json if None)
        """
        if data is None:
            data = Config().read_json("gas_config.json", default={})
        self._config = data

    @property
    def maxFeePerGas(self):
        """Max fee per gas in Gwei (None = no limit)"""
        return self._config.get("maxFeePerGas")

    @property
    def maxPriorityFeePerGas(self):
        """Priority fee (tip) in Gwei"""
        return self._config.get("maxPriorityFeePerGas", 1.5)

    def getGasLimit(self, operation_type):
        """Fallback gas limit for an operation type when estimation is unavailable"""
        gas_limits = dict(self.DEFAULT_GAS_LIMITS)
        gas_limits.update(self._config.get("gasLimit", {}))
        return gas_limits.get(operation_type, gas_limits["default"])


class GasManager:
    """
    EIP-1559 compliant gas management.

    - maxFeePerGas: Maximum total fee per gas unit (base + priority)
    - maxPriorityFeePerGas: Tip to validators for faster inclusion
    - gasLimit: Fallback gas units per transaction type
    """

    def __init__(self, manager, maxFeePerGas=None, maxPriorityFeePerGas=None, config=None):
        """
        Args:
            manager: Web3Manager instance
            maxFeePerGas: Max fee per gas in Gwei (overrides config)
            maxPriorityFeePerGas: Priority fee in Gwei (overrides config)
            config: GasConfig instance (created if None)
        """
        self.manager = manager
        self.config = config or GasConfig()
        self._maxFeePerGas = maxFeePerGas
        self._maxPriorityFeePerGas = maxPriorityFeePerGas

    @property
    def maxFeePerGas(self):
        if self._maxFeePerGas is not None:
            return self._maxFeePerGas
        return self.config.maxFeePerGas

    @property
    def maxPriorityFeePerGas(self):
        if self._maxPriorityFeePerGas is not None:
            return self._maxPriorityFeePerGas
        return self.config.maxPriorityFeePerGas

    def getBaseFee(self):
        """Base fee of the latest block in Wei"""
        latest_block = self.manager.w3.eth.get_block("latest")
        return latest_block.get("baseFeePerGas", 0)

    def getGasParams(self):
        """
        EIP-1559 fee fields for a transaction.

        Raises:
            GasPriceTooHighError: If base fee exceeds maxFeePerGas
        """
        base_fee = self.getBaseFee()
        priority_fee_wei = int(self.maxPriorityFeePerGas * 1e9)

        if self.maxFeePerGas is not None:
            max_fee_wei = int(self.maxFeePerGas * 1e9)
            if max_fee_wei < base_fee:
                raise GasPriceTooHighError(
                    f"Current base fee ({base_fee / 1e9:.2f} Gwei) exceeds your "
                    f"maxFeePerGas ({self.maxFeePerGas} Gwei)"
                )
        else:
            max_fee_wei = int((base_fee + priority_fee_wei) * 1.2)

        return {
            "maxFeePerGas": max_fee_wei,
            "maxPriorityFeePerGas": min(priority_fee_wei, max_fee_wei),
        }

    def estimateGas(self, estimate, operation_type=None):
        """
        Run a gas estimate callable.

        A revert during estimation is raised as TransactionError carrying the
        revert reason; any other failure falls back to the configured limit.
        """
        try:
            return estimate()
        except ContractLogicError as e:
            reason = getattr(e, "message", None) or str(e)
            raise TransactionError(
                f"{operation_type or 'transaction'} would revert: {reason}",
                reason=reason,
            ) from e
        except ValueError as e:
            fallback = self.config.getGasLimit(operation_type)
            logger.warning("Gas estimation failed for %s (%s), using %d", operation_type, e, fallback)
            return fallback
