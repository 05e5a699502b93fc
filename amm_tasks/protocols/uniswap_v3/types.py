"""Uniswap V3 value objects"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Dict, Optional, Tuple

from web3 import Web3

from .config import FeeTier, spacing_for
from .math import MAX_TICK, MIN_TICK

ADDRESS_ZERO = "0x0000000000000000000000000000000000000000"

DEFAULT_DEADLINE_MINUTES = 1
DEFAULT_SLIPPAGE = Fraction(1, 1000)  # 0.1%


def deadline_from_now(minutes=DEFAULT_DEADLINE_MINUTES, now=None) -> int:
    """Absolute Unix deadline `minutes` from now (seconds rounded up)"""
    if minutes <= 0:
        raise ValueError(f"Deadline offset must be positive, got {minutes} minutes")
    now = time.time() if now is None else now
    return math.ceil(now) + 60 * int(minutes)


def sort_addresses(address_a: str, address_b: str) -> Tuple[str, str]:
    """Order two addresses the way pools order token0/token1"""
    if int(address_a, 16) == int(address_b, 16):
        raise ValueError(f"Identical token addresses: {address_a}")
    if int(address_a, 16) < int(address_b, 16):
        return address_a, address_b
    return address_b, address_a


@dataclass(frozen=True)
class Token:
    """
    An ERC20 token on a given chain.

    Attributes:
        address: Checksummed contract address
        decimals: Token decimals, as reported by the contract
        chain_id: Chain the token lives on
        symbol: Optional display symbol
    """

    address: str
    decimals: int
    chain_id: int
    symbol: Optional[str] = None

    def __post_init__(self):
        if not Web3.is_address(self.address):
            raise ValueError(f"Invalid token address: {self.address}")
        object.__setattr__(self, "address", Web3.to_checksum_address(self.address))
        if not 0 <= self.decimals <= 255:
            raise ValueError(f"Invalid decimals for {self.address}: {self.decimals}")

    def sorts_before(self, other: Token) -> bool:
        if self.chain_id != other.chain_id:
            raise ValueError("Tokens are on different chains")
        return int(self.address, 16) < int(other.address, 16)

    def __str__(self):
        return self.symbol or self.address


@dataclass(frozen=True)
class PositionRange:
    """Tick bounds of a liquidity position"""

    tick_lower: int
    tick_upper: int

    def __post_init__(self):
        if self.tick_lower >= self.tick_upper:
            raise ValueError(f"tick_lower ({self.tick_lower}) must be < tick_upper ({self.tick_upper})")

    @property
    def in_bounds(self) -> bool:
        """Whether the contract will accept these ticks"""
        return self.tick_lower >= MIN_TICK and self.tick_upper <= MAX_TICK


@dataclass(frozen=True)
class PoolIdentity:
    """
    Which pool to query.

    Attributes:
        token_a, token_b: Pool tokens in any order
        fee: Fee tier
        factory: Factory that deployed the pool (for address derivation)
        address: Explicit pool address, skips resolution
    """

    token_a: Token
    token_b: Token
    fee: int
    factory: Optional[str] = None
    address: Optional[str] = None

    def __post_init__(self):
        spacing_for(self.fee)
        if self.token_a.address == self.token_b.address:
            raise ValueError(f"Pool tokens must differ: {self.token_a.address}")

    @property
    def tokens(self) -> Tuple[Token, Token]:
        """(token0, token1) sorted by address"""
        if self.token_a.sorts_before(self.token_b):
            return self.token_a, self.token_b
        return self.token_b, self.token_a

    @property
    def tick_spacing(self) -> int:
        return spacing_for(self.fee)


@dataclass(frozen=True)
class MintParams:
    """
    NonfungiblePositionManager.mint arguments.

    Amounts are in each token's smallest unit.
    """

    token0: str
    token1: str
    fee: int
    tick_lower: int
    tick_upper: int
    amount0_desired: int
    amount1_desired: int
    recipient: str
    deadline: int
    amount0_min: int = 0
    amount1_min: int = 0

    def __post_init__(self):
        spacing = spacing_for(self.fee)
        if int(self.token0, 16) >= int(self.token1, 16):
            raise ValueError(f"token0 ({self.token0}) must sort before token1 ({self.token1})")
        if not PositionRange(self.tick_lower, self.tick_upper).in_bounds:
            raise ValueError(f"Ticks [{self.tick_lower}, {self.tick_upper}] outside [{MIN_TICK}, {MAX_TICK}]")
        if self.tick_lower % spacing or self.tick_upper % spacing:
            raise ValueError(
                f"Ticks [{self.tick_lower}, {self.tick_upper}] are not multiples of spacing {spacing}"
            )
        for name in ("amount0_desired", "amount1_desired", "amount0_min", "amount1_min"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.amount0_desired == 0 and self.amount1_desired == 0:
            raise ValueError("At least one desired amount must be positive")
        if self.amount0_min > self.amount0_desired:
            raise ValueError(f"amount0_min ({self.amount0_min}) exceeds amount0_desired ({self.amount0_desired})")
        if self.amount1_min > self.amount1_desired:
            raise ValueError(f"amount1_min ({self.amount1_min}) exceeds amount1_desired ({self.amount1_desired})")

    @classmethod
    def create(cls, token0, token1, fee, position_range, amount0_desired, amount1_desired,
               recipient, amount0_min=0, amount1_min=0,
               deadline_minutes=DEFAULT_DEADLINE_MINUTES, now=None):
        """Build params with the deadline computed now"""
        return cls(
            token0=token0,
            token1=token1,
            fee=int(fee),
            tick_lower=position_range.tick_lower,
            tick_upper=position_range.tick_upper,
            amount0_desired=int(amount0_desired),
            amount1_desired=int(amount1_desired),
            amount0_min=int(amount0_min),
            amount1_min=int(amount1_min),
            recipient=recipient,
            deadline=deadline_from_now(deadline_minutes, now),
        )

    def to_tuple(self) -> tuple:
        """Convert to tuple in ABI struct order"""
        return (
            Web3.to_checksum_address(self.token0),
            Web3.to_checksum_address(self.token1),
            self.fee,
            self.tick_lower,
            self.tick_upper,
            self.amount0_desired,
            self.amount1_desired,
            self.amount0_min,
            self.amount1_min,
            Web3.to_checksum_address(self.recipient),
            self.deadline,
        )


class TradeType(Enum):
    EXACT_INPUT = "EXACT_INPUT"


@dataclass(frozen=True)
class TradeRequest:
    """
    An exact-input swap request.

    slippage_tolerance is a Fraction (0.1% == Fraction(1, 1000)); deadline is an
    absolute Unix timestamp fixed when the request is created.
    """

    input_token: Token
    output_token: Token
    input_amount: int
    recipient: str
    deadline: int
    slippage_tolerance: Fraction = DEFAULT_SLIPPAGE
    trade_type: TradeType = TradeType.EXACT_INPUT

    def __post_init__(self):
        if self.trade_type is not TradeType.EXACT_INPUT:
            raise ValueError(f"Unsupported trade type: {self.trade_type}")
        if self.input_amount <= 0:
            raise ValueError(f"Input amount must be positive, got {self.input_amount}")
        if self.input_token.address == self.output_token.address:
            raise ValueError("Input and output tokens must differ")
        if isinstance(self.slippage_tolerance, float):
            raise TypeError("Slippage tolerance must be exact (Fraction, int or str), not float")
        slippage = Fraction(self.slippage_tolerance)
        if not 0 <= slippage < 1:
            raise ValueError(f"Slippage tolerance must be in [0, 1), got {slippage}")
        object.__setattr__(self, "slippage_tolerance", slippage)
        if not Web3.is_address(self.recipient):
            raise ValueError(f"Invalid recipient: {self.recipient}")

    @classmethod
    def create(cls, input_token, output_token, input_amount, recipient,
               slippage_tolerance=DEFAULT_SLIPPAGE,
               deadline_minutes=DEFAULT_DEADLINE_MINUTES, now=None):
        """Build a request with the deadline computed now"""
        return cls(
            input_token=input_token,
            output_token=output_token,
            input_amount=int(input_amount),
            recipient=recipient,
            deadline=deadline_from_now(deadline_minutes, now),
            slippage_tolerance=slippage_tolerance,
        )


@dataclass(frozen=True)
class TickInfo:
    liquidity_net: int
    liquidity_gross: int


@dataclass(frozen=True)
class PoolSnapshot:
    """Tradable state of a pool at one moment; never reuse across calls"""

    address: str
    token0: Token
    token1: Token
    fee: int
    sqrt_price_x96: int
    liquidity: int
    current_tick: int
    ticks: Dict[int, TickInfo] = field(default_factory=dict)

    @property
    def tick_spacing(self) -> int:
        return spacing_for(self.fee)

    def involves(self, token: Token) -> bool:
        return token.address in (self.token0.address, self.token1.address)


@dataclass(frozen=True)
class SwapInstruction:
    """A fully built exactInputSingle call ready to submit to the router"""

    router: str
    pool_address: str
    token_in: str
    token_out: str
    fee: int
    recipient: str
    deadline: int
    amount_in: int
    expected_amount_out: int
    amount_out_minimum: int
    sqrt_price_after_x96: int
    calldata: bytes
    value: int = 0

    @property
    def calldata_hex(self) -> str:
        return "0x" + self.calldata.hex()


__all__ = [
    "ADDRESS_ZERO",
    "DEFAULT_DEADLINE_MINUTES",
    "DEFAULT_SLIPPAGE",
    "FeeTier",
    "MintParams",
    "PoolIdentity",
    "PoolSnapshot",
    "PositionRange",
    "SwapInstruction",
    "TickInfo",
    "Token",
    "TradeRequest",
    "TradeType",
    "deadline_from_now",
    "sort_addresses",
]
