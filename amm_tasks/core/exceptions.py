"""Custom exceptions for AMM tasks"""


class AMMError(Exception):
    """
    Base exception for all AMM errors.

    Keyword arguments are kept as diagnostic context (pool address, requested
    amounts, computed bounds) and appended to the message.
    """

    def __init__(self, message="", **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self):
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class ConfigError(AMMError):
    """Configuration-related errors"""
    pass


class UnsupportedFeeTier(ConfigError):
    """Fee tier has no tick spacing mapping"""
    pass


class InvalidSpacing(ConfigError):
    """Tick spacing is not a positive integer"""
    pass


class ConnectionError(AMMError):
    """Web3 connection errors"""
    pass


class DivisionByZero(AMMError, ZeroDivisionError):
    """Degenerate price ratio (zero denominator)"""
    pass


class PoolError(AMMError):
    """Pool-related errors (not found, not initialized, etc.)"""
    pass


class PoolNotFound(PoolError):
    """Pool address could not be resolved or has no code"""
    pass


class StaleQuery(PoolError):
    """Pool sub-queries returned an inconsistent tick/price pair"""
    pass


class InsufficientLiquidity(PoolError):
    """Snapshot cannot fill the input within its bracketing tick range"""
    pass


class TransactionError(AMMError):
    """Transaction execution errors"""
    pass


class ExpiredDeadline(TransactionError):
    """Deadline already passed"""
    pass


class StalePrice(TransactionError):
    """Pool price moved between snapshot and execution (router rejected the minimum output)"""
    pass


class ApprovalFailed(TransactionError):
    """ERC20 approve reverted"""
    pass


class TransferFailed(TransactionError):
    """ERC20 transfer reverted"""
    pass
