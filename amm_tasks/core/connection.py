"""Web3 connection management"""

import os
import logging
from web3 import Web3
from dotenv import load_dotenv
from eth_account import Account
from mnemonic import Mnemonic
from .config import Config
from .exceptions import ConnectionError, ConfigError

logger = logging.getLogger(__name__)

# Hardhat-style signer list size
DEFAULT_ACCOUNT_COUNT = 20
DERIVATION_PATH = "m/44'/60'/0'/0/{index}"


class Web3Manager:
    """Manages Web3 connection and the selected signing account"""

    def __init__(self, require_signer=False, account_index=0, w3=None):
        """
        Initialize Web3 connection.

        Args:
            require_signer: If True, loads a signing account (PRIVATE_KEY or MNEMONIC)
            account_index: Which derived account to sign with (0..19)
            w3: Existing Web3 instance (RPC_URL is used when None)
        """
        load_dotenv()
        load_dotenv("wallet.env")

        self.config = Config()
        self.w3 = w3 if w3 is not None else self._setup_web3()

        self.account = None
        if require_signer:
            self.use_account(account_index)

    def _setup_web3(self):
        """Setup Web3 connection"""
        rpc_url = os.getenv("RPC_URL")
        if not rpc_url:
            raise ConfigError("RPC_URL not found in environment")

        w3 = Web3(Web3.HTTPProvider(rpc_url))

        if not w3.is_connected():
            raise ConnectionError(f"Failed to connect to {rpc_url}")
        logger.debug("Connected to %s", rpc_url)
        return w3

    def accounts(self, count=DEFAULT_ACCOUNT_COUNT):
        """
        Selectable signing accounts.

        MNEMONIC derives `count` accounts along the standard Ethereum path;
        otherwise PRIVATE_KEY yields a single account.
        """
        phrase = os.getenv("MNEMONIC")
        if phrase:
            if not Mnemonic("english").check(phrase.strip()):
                raise ConfigError("MNEMONIC is not a valid BIP-39 phrase")
            Account.enable_unaudited_hdwallet_features()
            return [
                Account.from_mnemonic(phrase.strip(), account_path=DERIVATION_PATH.format(index=i))
                for i in range(count)
            ]

        private_key = os.getenv("PRIVATE_KEY")
        if private_key:
            return [Account.from_key(private_key)]

        raise ConfigError("Neither MNEMONIC nor PRIVATE_KEY found in environment / wallet.env")

    def use_account(self, index):
        """Select the signing account by index"""
        accounts = self.accounts()
        if index < 0 or index >= len(accounts):
            raise ConfigError(f"Account index {index} out of range [0..{len(accounts) - 1}]")
        self.account = accounts[index]
        logger.debug("Using account %d: %s", index, self.account.address)
        return self.account

    @property
    def address(self):
        """Get account address (from signer or PUBLIC_KEY in wallet.env)"""
        if self.account:
            return self.account.address
        public_key = os.getenv("PUBLIC_KEY")
        return public_key if public_key else None

    @property
    def chain_id(self):
        """Get current chain ID"""
        return self.w3.eth.chain_id

    def get_nonce(self, address=None):
        """Get transaction count (nonce)"""
        addr = address or self.address
        if not addr:
            raise ValueError("No address provided")
        return self.w3.eth.get_transaction_count(addr)

    def has_code(self, address):
        """True when a contract is deployed at address"""
        return len(self.w3.eth.get_code(self.checksum(address))) > 0

    def get_contract(self, address, abi_name):
        """Create contract instance"""
        abi = self.config.get_abi(abi_name)
        return self.w3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=abi
        )

    def checksum(self, address):
        """Convert address to checksum format"""
        return Web3.to_checksum_address(address)
