"""
Network Registry
Named EVM networks: RPC endpoints, chain IDs and block explorers
"""

import os
import json
from dataclasses import dataclass
from typing import Dict, List, Optional
from web3 import Web3
from loguru import logger
from dotenv import load_dotenv

from deployer.exceptions import ConfigurationError, NetworkNotFoundError

load_dotenv()

DEFAULT_RPC_TIMEOUT = 30


@dataclass(frozen=True)
class ExplorerConfig:
    api_url: str
    browser_url: str
    api_key: Optional[str] = None
    api_key_env: Optional[str] = None


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    rpc_url: str
    chain_id: Optional[int] = None
    explorer: Optional[ExplorerConfig] = None

    def address_url(self, address: str) -> Optional[str]:
        """Explorer page for an address, if the network has an explorer"""
        if self.explorer is None:
            return None
        return f"{self.explorer.browser_url.rstrip('/')}/address/{address}"

    def tx_url(self, tx_hash: str) -> Optional[str]:
        """Explorer page for a transaction, if the network has an explorer"""
        if self.explorer is None:
            return None
        return f"{self.explorer.browser_url.rstrip('/')}/tx/{tx_hash}"


class NetworkRegistry:
    """
    Registry of deployable networks loaded from config/networks.json

    RPC URLs may be overridden per network through the variable named in
    'url_env'; explorer API keys are only ever read from the environment.
    """

    def __init__(self, config_path: str = 'config/networks.json', config: Optional[Dict] = None):
        """
        Initialize Network Registry

        Args:
            config_path: JSON registry file
            config: Already-loaded registry (skips reading config_path)
        """
        if config is None:
            try:
                with open(config_path, 'r') as f:
                    config = json.load(f)
            except FileNotFoundError as e:
                raise ConfigurationError(f"Network registry not found: {config_path}") from e

        self.config = config
        self.timeout = config.get('rpc', {}).get('timeout', DEFAULT_RPC_TIMEOUT)
        self.networks = self._init_networks()

        logger.debug(f"Network registry loaded with {len(self.networks)} networks")

    def _init_networks(self) -> Dict[str, NetworkConfig]:
        networks = {}

        for name, net in self.config.get('networks', {}).items():
            rpc_url = net.get('url')
            url_env = net.get('url_env')
            if url_env and os.getenv(url_env):
                rpc_url = os.getenv(url_env)

            if not rpc_url:
                raise ConfigurationError(f"Network {name} has no RPC URL")

            explorer = None
            explorer_config = net.get('explorer')
            if explorer_config:
                api_key_env = explorer_config.get('api_key_env')
                explorer = ExplorerConfig(
                    api_url=explorer_config['api_url'],
                    browser_url=explorer_config['browser_url'],
                    api_key=os.getenv(api_key_env) if api_key_env else None,
                    api_key_env=api_key_env
                )

            networks[name] = NetworkConfig(
                name=name,
                rpc_url=rpc_url,
                chain_id=net.get('chain_id'),
                explorer=explorer
            )

        return networks

    def names(self) -> List[str]:
        return sorted(self.networks)

    def get(self, name: str) -> NetworkConfig:
        """
        Look up a network

        Args:
            name: Network name (as in hardhat's --network)

        Returns:
            Network configuration
        """
        try:
            return self.networks[name]
        except KeyError:
            raise NetworkNotFoundError(
                f"Unknown network {name!r}; available: {', '.join(self.names())}"
            ) from None

    def connect(self, name: str) -> Web3:
        """
        Connect to a network and check it is the chain we expect

        Args:
            name: Network name

        Returns:
            Connected Web3 instance
        """
        network = self.get(name)

        w3 = Web3(Web3.HTTPProvider(network.rpc_url, request_kwargs={'timeout': self.timeout}))

        if not w3.is_connected():
            raise ConfigurationError(f"Failed to connect to {name} at {network.rpc_url}")

        if network.chain_id is not None:
            remote_chain_id = w3.eth.chain_id
            if remote_chain_id != network.chain_id:
                raise ConfigurationError(
                    f"{name} RPC reports chain ID {remote_chain_id}, expected {network.chain_id}"
                )

        logger.success(f"Connected to {name} (chain ID {w3.eth.chain_id})")
        return w3
