"""Shared fixtures and test doubles for deployment tests."""

from typing import Dict, List, Optional, Set
from unittest.mock import Mock

import pytest
from web3 import Web3

from deployer.exceptions import ArtifactNotFoundError

DEPLOYER = Web3.to_checksum_address("0x" + "ab" * 20)

SUITE = ["Fusion", "FusionProxyFactory", "OpenBatchExecutor", "OpenBatchExecutorNoFailure"]


def contract_address(nonce: int) -> str:
    """Deterministic fake address for a deployment at a nonce"""
    return Web3.to_checksum_address(f"0x{nonce + 1:040x}")


def _payload_name(payload: Dict) -> str:
    return bytes.fromhex(payload['data'][len("0x6080"):]).decode()


class FakeExecutionClient:
    """
    In-memory execution client

    Gas estimates come from `estimates` (per contract name) or `default_gas`;
    names in `failing` make estimation raise; `submit_errors` and
    `confirm_errors` make deployment of a name fail at that stage.
    """

    def __init__(
        self,
        estimates: Optional[Dict[str, int]] = None,
        default_gas: int = 1_000_000,
        failing: Optional[Dict[str, str]] = None,
        missing: Optional[Set[str]] = None,
        submit_errors: Optional[Dict[str, Exception]] = None,
        confirm_errors: Optional[Dict[str, Exception]] = None,
    ):
        self.estimates = estimates or {}
        self.default_gas = default_gas
        self.failing = failing or {}
        self.missing = missing or set()
        self.submit_errors = submit_errors or {}
        self.confirm_errors = confirm_errors or {}

        self.estimate_calls: List[str] = []
        self.deploy_calls: List[Dict] = []

    def get_contract_factory(self, name):
        if name in self.missing:
            raise ArtifactNotFoundError(f"Artifact for {name} not found")
        factory = Mock()
        factory.constructor.return_value.data_in_transaction = "0x6080" + name.encode().hex()
        return factory

    def estimate_gas(self, from_address, payload):
        name = _payload_name(payload)
        self.estimate_calls.append(name)
        if name in self.failing:
            raise ValueError(self.failing[name])
        value = self.estimates.get(name, self.default_gas)
        return value(len(self.estimate_calls)) if callable(value) else value

    def deploy_contract(self, name, args, gas_limit, nonce, signer=None):
        self.deploy_calls.append({
            'name': name,
            'args': tuple(args),
            'gas_limit': gas_limit,
            'nonce': nonce,
            'signer': signer
        })
        if name in self.submit_errors:
            raise self.submit_errors[name]

        handle = Mock()
        handle.tx_hash = "0x" + f"{nonce:064x}"
        if name in self.confirm_errors:
            handle.wait_for_deployment.side_effect = self.confirm_errors[name]
        else:
            handle.wait_for_deployment.return_value = contract_address(nonce)
        return handle


@pytest.fixture
def signer():
    """Deployer signer whose pending nonce is 5"""
    mock_signer = Mock()
    mock_signer.address = DEPLOYER
    mock_signer.get_nonce.return_value = 5
    return mock_signer


@pytest.fixture
def client():
    return FakeExecutionClient()
