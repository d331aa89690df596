"""
Blockchain Interaction Package
Handles contract artifacts, deployment transactions and nonce sequencing
"""

from .nonce_manager import SequenceCursor
from .transaction_builder import TransactionBuilder, build_deployment_payload
from .contract_manager import ContractManager
from .client import DeploymentHandle, ExecutionClient

__all__ = [
    'SequenceCursor',
    'TransactionBuilder',
    'build_deployment_payload',
    'ContractManager',
    'DeploymentHandle',
    'ExecutionClient'
]
