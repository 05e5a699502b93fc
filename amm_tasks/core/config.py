"""Configuration loading and management"""

import os
import json
import logging
from pathlib import Path
from .exceptions import ConfigError

logger = logging.getLogger(__name__)


class Config:
    """Centralized configuration manager for shared settings"""

    _instance = None
    _tokens = None
    _abis = None
    _config_dir = None

    # Shared ABIs are inside the package (not user-configurable)
    PACKAGE_ABIS = Path(__file__).parent.parent / "abis.json"

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if Config._abis is None:
            self._load()

    @classmethod
    def reset(cls):
        """Drop cached state so the next instance reloads from disk"""
        cls._instance = None
        cls._tokens = None
        cls._abis = None
        cls._config_dir = None

    @staticmethod
    def _find_config_dir():
        """Find config directory, or None when no candidate exists"""
        env_path = os.getenv("AMM_CONFIG_DIR")
        if env_path:
            path = Path(env_path)
            if path.exists():
                return path
            logger.warning("AMM_CONFIG_DIR=%s does not exist, searching defaults", env_path)

        locations = [
            Path.cwd() / "config",
            Path.home() / ".amm-tasks" / "config",
        ]

        for path in locations:
            if path.exists():
                return path

        return None

    def _load(self):
        """Load configuration files"""
        config_dir = self._find_config_dir()
        Config._config_dir = config_dir

        Config._tokens = {}
        if config_dir is not None:
            tokens_path = config_dir / "tokens.json"
            if tokens_path.exists():
                with open(tokens_path) as f:
                    Config._tokens = {k.upper(): v for k, v in json.load(f).items()}
        logger.debug("Config dir: %s (%d tokens)", config_dir, len(Config._tokens))

        if not self.PACKAGE_ABIS.exists():
            raise ConfigError(f"Shared ABIs not found: {self.PACKAGE_ABIS}")
        with open(self.PACKAGE_ABIS) as f:
            Config._abis = json.load(f)

    @property
    def config_dir(self):
        """Config directory in use (./config when none was found, created on first write)"""
        if Config._config_dir is not None:
            return Config._config_dir
        env_path = os.getenv("AMM_CONFIG_DIR")
        return Path(env_path) if env_path else Path.cwd() / "config"

    @property
    def artifacts_dir(self):
        """Directory holding compiled contract artifacts for deployment"""
        env_path = os.getenv("AMM_ARTIFACTS_DIR")
        if env_path:
            return Path(env_path)
        return self.config_dir / "artifacts"

    @property
    def common_tokens(self):
        """Common token symbol -> address mapping"""
        return Config._tokens or {}

    def get_abi(self, name):
        """Get ABI by name"""
        if name in Config._abis:
            return Config._abis[name]
        raise ConfigError(f"ABI not found: {name}")

    def get_token_address(self, symbol_or_address):
        """Resolve token symbol to address, or validate address"""
        token = symbol_or_address.upper()

        if token in self.common_tokens:
            return self.common_tokens[token]

        if symbol_or_address.startswith("0x") and len(symbol_or_address) == 42:
            return symbol_or_address

        raise ConfigError(f"Unknown token: {symbol_or_address}")

    def read_json(self, name, default=None):
        """Read a JSON file from the config directory"""
        path = self.config_dir / name
        if not path.exists():
            return default
        with open(path) as f:
            return json.load(f)

    def write_json(self, name, data):
        """Write a JSON file into the config directory, creating it if needed"""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        path = self.config_dir / name
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        return path
