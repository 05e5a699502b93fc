"""
Shared fixtures for all tests.
"""

import pytest
from unittest.mock import MagicMock, Mock
from web3 import Web3

from amm_tasks.core.config import Config
from amm_tasks.protocols.uniswap_v3.config import UniswapV3Config
from amm_tasks.protocols.uniswap_v3.math import sqrt_price_at_tick
from amm_tasks.protocols.uniswap_v3.snapshot import PoolDataSource
from amm_tasks.protocols.uniswap_v3.types import TickInfo, Token


CHAIN_ID = 31337

# token0 sorts before token1
TOKEN0_ADDRESS = Web3.to_checksum_address("0x1111111111111111111111111111111111111111")
TOKEN1_ADDRESS = Web3.to_checksum_address("0x2222222222222222222222222222222222222222")
POOL_ADDRESS = Web3.to_checksum_address("0x3333333333333333333333333333333333333333")
ROUTER_ADDRESS = Web3.to_checksum_address("0x4444444444444444444444444444444444444444")
NFPM_ADDRESS = Web3.to_checksum_address("0x5555555555555555555555555555555555555555")
FACTORY_ADDRESS = Web3.to_checksum_address("0x6666666666666666666666666666666666666666")
WALLET = Web3.to_checksum_address("0x1234567890AbcdEF1234567890aBcdef12345678")


class FakePoolSource(PoolDataSource):
    """In-memory pool state keyed by address"""

    def __init__(self, address=POOL_ADDRESS, sqrt_price_x96=None, tick=30,
                 liquidity=10 ** 24, ticks=None):
        self.address = address
        self.tick = tick
        self.sqrt_price_x96 = sqrt_price_at_tick(tick) if sqrt_price_x96 is None else sqrt_price_x96
        self._liquidity = liquidity
        self._ticks = ticks or {}
        self.tick_queries = []

    def resolve_pool(self, pool):
        return self.address

    def slot0(self, address):
        return self.sqrt_price_x96, self.tick

    def liquidity(self, address):
        return self._liquidity

    def ticks(self, address, index):
        self.tick_queries.append(index)
        return self._ticks.get(index, TickInfo(liquidity_net=0, liquidity_gross=0))


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    """Isolated config directory for every test"""
    monkeypatch.setenv("AMM_CONFIG_DIR", str(tmp_path))
    monkeypatch.delenv("AMM_ARTIFACTS_DIR", raising=False)
    Config.reset()
    UniswapV3Config._instance = None
    yield tmp_path
    Config.reset()
    UniswapV3Config._instance = None


@pytest.fixture
def token0():
    return Token(address=TOKEN0_ADDRESS, decimals=18, chain_id=CHAIN_ID, symbol="TKA")


@pytest.fixture
def token1():
    return Token(address=TOKEN1_ADDRESS, decimals=6, chain_id=CHAIN_ID, symbol="TKB")


@pytest.fixture
def mock_manager():
    """Web3Manager stand-in with a signer and no network"""
    manager = Mock()
    manager.chain_id = CHAIN_ID
    manager.address = WALLET
    manager.checksum = Web3.to_checksum_address
    manager.has_code = Mock(return_value=True)
    manager.get_contract = Mock(side_effect=lambda address, abi_name: MagicMock(name=f"{abi_name}@{address}"))
    manager.get_nonce = Mock(return_value=7)
    manager.w3 = MagicMock()
    manager.w3.eth.get_block.return_value = {"baseFeePerGas": 10 * 10 ** 9}
    manager.account = Mock()
    manager.account.address = WALLET
    manager.account.sign_transaction = Mock(return_value=Mock(raw_transaction=b"signed_tx"))
    return manager


@pytest.fixture
def receipt():
    return {
        "status": 1,
        "transactionHash": b"\x12\x34" * 16,
        "blockNumber": 123,
        "gasUsed": 150_000,
        "logs": [],
    }
