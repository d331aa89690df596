"""
Contract Manager
Loads compiled Hardhat artifacts and builds contract factories
"""

import json
import re
from pathlib import Path
from typing import Dict, List, Optional
from web3 import Web3
from loguru import logger

from deployer.exceptions import ArtifactNotFoundError, ConfigurationError

LIBRARY_PLACEHOLDER = re.compile(r"__\$\w{34}\$__")


class ContractManager:
    """
    Manages compiled contract artifacts and the factories built from them
    """

    def __init__(self, w3: Optional[Web3], artifacts_dir: str = "artifacts"):
        """
        Initialize Contract Manager

        Args:
            w3: Web3 instance (None when only reading artifacts)
            artifacts_dir: Hardhat artifacts root
        """
        self.w3 = w3
        self.artifacts_dir = Path(artifacts_dir)

        self._index: Optional[Dict[str, Path]] = None
        self._artifacts: Dict[str, Dict] = {}

        logger.info(f"Contract Manager initialized (artifacts: {self.artifacts_dir})")

    def _build_index(self) -> Dict[str, Path]:
        """Map contract names to artifact files under artifacts/contracts"""
        contracts_dir = self.artifacts_dir / "contracts"
        index: Dict[str, Path] = {}

        if not contracts_dir.is_dir():
            logger.warning(f"No compiled contracts in {contracts_dir}")
            return index

        for path in sorted(contracts_dir.rglob("*.json")):
            if path.name.endswith(".dbg.json"):
                continue

            name = path.stem
            if name in index:
                raise ConfigurationError(
                    f"Contract name {name} is ambiguous: {index[name]} and {path}"
                )
            index[name] = path

        logger.debug(f"Indexed {len(index)} contract artifacts")
        return index

    def available_contracts(self) -> List[str]:
        """Names of all compiled contracts"""
        if self._index is None:
            self._index = self._build_index()
        return sorted(self._index)

    def load_artifact(self, name: str) -> Dict:
        """
        Load and validate the artifact for a contract

        Args:
            name: Contract name

        Returns:
            Artifact dict with abi and bytecode
        """
        if name in self._artifacts:
            return self._artifacts[name]

        if self._index is None:
            self._index = self._build_index()

        path = self._index.get(name)
        if path is None:
            available = self.available_contracts()
            hint = f"available: {', '.join(available)}" if available else "run 'npx hardhat compile' first"
            raise ArtifactNotFoundError(f"Artifact for {name} not found in {self.artifacts_dir} ({hint})")

        with open(path, 'r') as f:
            artifact = json.load(f)

        if 'abi' not in artifact or 'bytecode' not in artifact:
            raise ConfigurationError(f"{path} is not a contract artifact")

        bytecode = artifact['bytecode']
        if not bytecode or bytecode == "0x":
            raise ConfigurationError(f"{name} has no bytecode (interface or abstract contract?)")

        placeholders = sorted(set(LIBRARY_PLACEHOLDER.findall(bytecode)))
        if placeholders:
            raise ConfigurationError(
                f"{name} has unlinked libraries: {', '.join(placeholders)}"
            )

        self._artifacts[name] = artifact
        return artifact

    def get_contract_factory(self, name: str):
        """
        Build a deployable contract factory

        Args:
            name: Contract name

        Returns:
            web3 contract class with abi and bytecode
        """
        if self.w3 is None:
            raise ConfigurationError("Contract factories need a connected Web3 instance")

        artifact = self.load_artifact(name)
        return self.w3.eth.contract(abi=artifact['abi'], bytecode=artifact['bytecode'])

    def encode_constructor_args(self, name: str, constructor_args) -> str:
        """ABI-encoded constructor arguments as bare hex (no 0x prefix)"""
        artifact = self.load_artifact(name)
        factory = self.get_contract_factory(name)

        data = Web3.to_bytes(hexstr=factory.constructor(*constructor_args).data_in_transaction)
        bytecode = Web3.to_bytes(hexstr=artifact['bytecode'])
        return data[len(bytecode):].hex()

    def _build_info_paths(self) -> List[Path]:
        build_info_dir = self.artifacts_dir / "build-info"
        return sorted(build_info_dir.glob("*.json")) if build_info_dir.is_dir() else []

    def build_info_for(self, name: str) -> Dict:
        """
        Find the build-info a contract was compiled in

        Args:
            name: Contract name

        Returns:
            Build-info dict (solcLongVersion, standard JSON input, output)
        """
        artifact = self.load_artifact(name)
        source_name = artifact.get('sourceName')
        contract_name = artifact.get('contractName', name)

        for path in self._build_info_paths():
            with open(path, 'r') as f:
                build_info = json.load(f)

            if contract_name in build_info.get('output', {}).get('contracts', {}).get(source_name, {}):
                logger.debug(f"{name} was compiled in {path.name}")
                return build_info

        raise ArtifactNotFoundError(
            f"No build-info for {source_name}:{contract_name} in {self.artifacts_dir / 'build-info'}"
        )

    def compiler_mismatches(self, expected: Dict) -> List[str]:
        """
        Compare build-info compiler settings with the expected ones

        Args:
            expected: Solidity settings (version, settings.optimizer, evmVersion, viaIR)

        Returns:
            Human-readable mismatch descriptions (empty when everything matches)
        """
        build_infos = self._build_info_paths()

        if not build_infos:
            return [f"No build-info found in {self.artifacts_dir / 'build-info'}"]

        wanted_settings = expected.get('settings', {})
        wanted_optimizer = wanted_settings.get('optimizer', {})
        mismatches = []

        for path in build_infos:
            with open(path, 'r') as f:
                build_info = json.load(f)

            settings = build_info.get('input', {}).get('settings', {})
            optimizer = settings.get('optimizer', {})

            checks = [
                ('solc version', expected.get('version'), build_info.get('solcVersion')),
                ('optimizer.enabled', wanted_optimizer.get('enabled'), optimizer.get('enabled')),
                ('optimizer.runs', wanted_optimizer.get('runs'), optimizer.get('runs')),
                ('evmVersion', wanted_settings.get('evmVersion'), settings.get('evmVersion')),
                ('viaIR', wanted_settings.get('viaIR'), settings.get('viaIR', False)),
            ]

            for label, wanted, actual in checks:
                if wanted is not None and wanted != actual:
                    mismatches.append(f"{path.name}: {label} is {actual!r}, expected {wanted!r}")

        return mismatches
