"""
Utilities Package
Gas margins, deployment simulation, the network registry and explorer verification
"""

from .gas_calculator import GasCalculator
from .simulation import DeploymentSimulator
from .network_registry import ExplorerConfig, NetworkConfig, NetworkRegistry
from .explorer_verifier import ExplorerVerifier

__all__ = [
    'GasCalculator',
    'DeploymentSimulator',
    'ExplorerConfig',
    'NetworkConfig',
    'NetworkRegistry',
    'ExplorerVerifier'
]
