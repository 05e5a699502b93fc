"""Contract deployment for Uniswap V3"""

import json
import logging
from pathlib import Path

from ....core.config import Config
from ....core.exceptions import ConfigError, TransactionError
from ....utils.transactions import TransactionBuilder
from ..config import UniswapV3Config
from ..types import ADDRESS_ZERO

logger = logging.getLogger(__name__)


class ArtifactStore:
    """
    Compiled contract artifacts (JSON with `abi` and `bytecode`).

    Looks up `<Name>.json` anywhere below the root, which covers both the
    Hardhat `artifacts/` layout and the npm packages' `artifacts/` folders.
    """

    def __init__(self, root=None):
        self.root = Path(root) if root else Config().artifacts_dir

    def load(self, name):
        if not self.root.exists():
            raise ConfigError(f"Artifacts directory not found: {self.root}")

        matches = sorted(p for p in self.root.rglob(f"{name}.json") if not p.name.endswith(".dbg.json"))
        if not matches:
            raise ConfigError(f"Artifact {name}.json not found under {self.root}")

        with open(matches[0]) as f:
            artifact = json.load(f)
        bytecode = artifact.get("bytecode")
        if isinstance(bytecode, dict):
            bytecode = bytecode.get("object")
        if not bytecode or bytecode in ("0x", "0x0"):
            raise ConfigError(f"Artifact {name} has no bytecode (abstract or not linked)")
        return {"abi": artifact["abi"], "bytecode": bytecode}


class DeploymentOrchestrator:
    """
    Deploys WETH9 -> UniswapV3Factory -> SwapRouter -> NonfungiblePositionManager.

    Each step waits for its receipt before the next one starts, since every
    contract after the factory takes earlier addresses as constructor args.
    """

    WETH = "WETH9"
    FACTORY = "UniswapV3Factory"
    ROUTER = "SwapRouter"
    POSITION_MANAGER = "NonfungiblePositionManager"

    def __init__(self, manager, artifacts=None, tx_builder=None):
        """
        Args:
            manager: Web3Manager with a signer
            artifacts: ArtifactStore (default location if None)
            tx_builder: TransactionBuilder (created if None)
        """
        self.manager = manager
        self.artifacts = artifacts or ArtifactStore()
        self.tx_builder = tx_builder or TransactionBuilder(manager)
        self.config = UniswapV3Config()

    def deploy_contract(self, name, *args):
        """Deploy one artifact and return its address"""
        artifact = self.artifacts.load(name)
        contract = self.manager.w3.eth.contract(abi=artifact["abi"], bytecode=artifact["bytecode"])

        logger.info("Deploying %s%s", name, f" with {list(args)}" if args else "")
        receipt = self.tx_builder.build_and_send(contract.constructor(*args), operation_type="deploy")
        address = receipt.get("contractAddress")
        if not address:
            raise TransactionError(f"{name} deployment returned no contract address")

        address = self.manager.checksum(address)
        logger.info("%s deployed at %s", name, address)
        return address

    def deploy_weth(self):
        address = self.deploy_contract(self.WETH)
        self.config.save_contracts(self.manager.chain_id, {"weth": address})
        return address

    def deploy_all(self, weth=None, descriptor=ADDRESS_ZERO):
        """
        Deploy the full stack.

        Args:
            weth: Existing WETH9 address (deployed when None)
            descriptor: Token descriptor address for position NFTs

        Returns:
            Dict of contract addresses keyed weth/factory/router/nfpm
        """
        weth = self.manager.checksum(weth) if weth else self.deploy_contract(self.WETH)
        factory = self.deploy_contract(self.FACTORY)
        router = self.deploy_contract(self.ROUTER, factory, weth)
        nfpm = self.deploy_contract(
            self.POSITION_MANAGER, factory, weth, self.manager.checksum(descriptor)
        )

        addresses = {"weth": weth, "factory": factory, "router": router, "nfpm": nfpm}
        self.config.save_contracts(self.manager.chain_id, addresses)
        return addresses
