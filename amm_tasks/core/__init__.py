"""Core module - configuration, connection and exceptions"""

from .config import Config
from .connection import Web3Manager
from .exceptions import (
    AMMError,
    ConfigError,
    ConnectionError,
    TransactionError,
    PoolError,
    UnsupportedFeeTier,
    InvalidSpacing,
    DivisionByZero,
    PoolNotFound,
    StaleQuery,
    InsufficientLiquidity,
    ExpiredDeadline,
    StalePrice,
    ApprovalFailed,
    TransferFailed,
)

__all__ = [
    "Config",
    "Web3Manager",
    "AMMError",
    "ConfigError",
    "ConnectionError",
    "TransactionError",
    "PoolError",
    "UnsupportedFeeTier",
    "InvalidSpacing",
    "DivisionByZero",
    "PoolNotFound",
    "StaleQuery",
    "InsufficientLiquidity",
    "ExpiredDeadline",
    "StalePrice",
    "ApprovalFailed",
    "TransferFailed",
]
