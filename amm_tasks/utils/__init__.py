"""Gas and transaction utilities"""

from .gas import GasConfig, GasManager, GasPriceTooHighError
from .transactions import TransactionBuilder

__all__ = [
    "GasConfig",
    "GasManager",
    "GasPriceTooHighError",
    "TransactionBuilder",
]
