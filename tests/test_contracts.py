"""
Live Deployment Tests
Deploys compiled artifacts against a development node
"""

import os

import pytest

from blockchain.client import ExecutionClient
from blockchain.contract_manager import ContractManager
from deployer.exceptions import SimulationFailure
from deployer.models import DeploymentTarget
from deployer.sequencer import DeploymentSequencer
from deployer.wallet_manager import WalletManager

# Note: These tests require a local Hardhat node and compiled artifacts
# Run: npx hardhat compile && npx hardhat node
# Then: DEPLOY_TEST_RPC_URL=http://127.0.0.1:8545 DEPLOY_TEST_PRIVATE_KEY=0x... pytest tests/test_contracts.py

RPC_URL = os.getenv("DEPLOY_TEST_RPC_URL")
PRIVATE_KEY = os.getenv("DEPLOY_TEST_PRIVATE_KEY")
ARTIFACTS_DIR = os.getenv("DEPLOY_TEST_ARTIFACTS", "artifacts")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not (RPC_URL and PRIVATE_KEY and os.path.isdir(ARTIFACTS_DIR)),
        reason="Requires DEPLOY_TEST_RPC_URL, DEPLOY_TEST_PRIVATE_KEY and compiled artifacts"
    ),
]


@pytest.fixture
def w3():
    from web3 import Web3
    return Web3(Web3.HTTPProvider(RPC_URL))


@pytest.fixture
def client(w3):
    return ExecutionClient(w3, ContractManager(w3, ARTIFACTS_DIR), WalletManager([PRIVATE_KEY]))


@pytest.fixture
def signer(client):
    return client.get_signers()[0]


def test_suite_deploys_with_consecutive_nonces(w3, client, signer):
    names = ["Fusion", "OpenBatchExecutor", "OpenBatchExecutorNoFailure"]
    start = signer.get_nonce()

    results = DeploymentSequencer(client).run([DeploymentTarget(n) for n in names], signer)

    assert [r.nonce for r in results] == list(range(start, start + len(names)))
    assert signer.get_nonce() == start + len(names)
    for result in results:
        assert w3.eth.get_code(result.deployed_address) != b""


def test_unknown_contract_fails_preflight(client, signer):
    start = signer.get_nonce()

    with pytest.raises(SimulationFailure):
        DeploymentSequencer(client).run([DeploymentTarget("Fusion"), DeploymentTarget("NoSuchContract")], signer)

    assert signer.get_nonce() == start
