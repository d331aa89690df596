"""
Unit Tests for the Web3-backed execution client
"""

from unittest.mock import Mock

import pytest
from web3 import Web3
from web3.exceptions import TimeExhausted

from blockchain.client import DeploymentHandle, ExecutionClient
from conftest import DEPLOYER, contract_address
from deployer.exceptions import ConfirmationFailure, SignerUnavailableError
from deployer.wallet_manager import Signer

TX_HASH = b"\x12" * 32


@pytest.fixture
def w3():
    """Mock Web3 instance"""
    mock_w3 = Mock(spec=Web3)
    mock_w3.eth = Mock()
    mock_w3.eth.chain_id = 84532
    mock_w3.eth.estimate_gas.return_value = 1_234_567
    mock_w3.eth.send_raw_transaction.return_value = TX_HASH
    mock_w3.eth.wait_for_transaction_receipt.return_value = {
        'status': 1,
        'contractAddress': contract_address(5).lower(),
        'gasUsed': 1_000_000,
        'blockNumber': 99
    }
    return mock_w3


@pytest.fixture
def factory():
    mock_factory = Mock()
    mock_factory.constructor.return_value.build_transaction.return_value = {
        'from': DEPLOYER,
        'nonce': 5,
        'gas': 1_200_000,
        'chainId': 84532,
        'data': '0x6080'
    }
    return mock_factory


@pytest.fixture
def tx_signer():
    mock_signer = Mock()
    mock_signer.address = DEPLOYER
    mock_signer.sign_transaction.return_value.raw_transaction = b"signed"
    return mock_signer


@pytest.fixture
def client(w3, factory, tx_signer):
    contract_manager = Mock()
    contract_manager.get_contract_factory.return_value = factory
    wallet_manager = Mock()
    wallet_manager.get_signers.return_value = [tx_signer]
    return ExecutionClient(w3, contract_manager, wallet_manager, confirmation_timeout=60)


class TestExecutionClient:

    def test_estimate_gas_uses_checksummed_sender(self, client, w3):
        gas = client.estimate_gas(DEPLOYER.lower(), {'data': '0x6080'})

        assert gas == 1_234_567
        w3.eth.estimate_gas.assert_called_once_with({'from': DEPLOYER, 'data': '0x6080'})

    def test_deploy_builds_signs_and_sends(self, client, w3, factory, tx_signer):
        handle = client.deploy_contract("Fusion", (), gas_limit=1_200_000, nonce=5, signer=tx_signer)

        factory.constructor.return_value.build_transaction.assert_called_once_with({
            'from': DEPLOYER,
            'nonce': 5,
            'gas': 1_200_000,
            'chainId': 84532
        })
        tx_signer.sign_transaction.assert_called_once()
        w3.eth.send_raw_transaction.assert_called_once_with(b"signed")
        assert handle.tx_hash == Web3.to_hex(TX_HASH)
        assert handle.nonce == 5
        assert handle.gas_limit == 1_200_000

    def test_deploy_passes_constructor_args(self, client, factory, tx_signer):
        client.deploy_contract("FusionProxyFactory", (DEPLOYER, 10005), gas_limit=1, nonce=0, signer=tx_signer)

        factory.constructor.assert_called_once_with(DEPLOYER, 10005)

    def test_deploy_defaults_to_first_signer(self, client, tx_signer):
        client.deploy_contract("Fusion", (), gas_limit=1, nonce=0)

        tx_signer.sign_transaction.assert_called_once()

    def test_deploy_without_signers(self, client):
        client.wallet_manager.get_signers.return_value = []

        with pytest.raises(SignerUnavailableError):
            client.deploy_contract("Fusion", (), gas_limit=1, nonce=0)

    def test_send_error_propagates(self, client, w3, tx_signer):
        w3.eth.send_raw_transaction.side_effect = ValueError("nonce too low")

        with pytest.raises(ValueError, match="nonce too low"):
            client.deploy_contract("Fusion", (), gas_limit=1, nonce=0, signer=tx_signer)


class TestDeploymentHandle:

    def test_wait_returns_checksummed_address(self, w3):
        handle = DeploymentHandle(w3, "Fusion", "0xabc", nonce=5, gas_limit=1_200_000, timeout=60)

        assert handle.wait_for_deployment() == contract_address(5)
        w3.eth.wait_for_transaction_receipt.assert_called_once_with("0xabc", timeout=60)

    def test_wait_is_idempotent(self, w3):
        handle = DeploymentHandle(w3, "Fusion", "0xabc", nonce=5, gas_limit=1)

        handle.wait_for_deployment()
        handle.wait_for_deployment()

        w3.eth.wait_for_transaction_receipt.assert_called_once()

    def test_reverted_receipt(self, w3):
        w3.eth.wait_for_transaction_receipt.return_value = {
            'status': 0, 'contractAddress': None, 'gasUsed': 1_200_000, 'blockNumber': 99
        }
        handle = DeploymentHandle(w3, "Fusion", "0xabc", nonce=5, gas_limit=1_200_000)

        with pytest.raises(ConfirmationFailure, match="reverted") as excinfo:
            handle.wait_for_deployment()

        assert excinfo.value.target == "Fusion"
        assert excinfo.value.nonce == 5

    def test_receipt_timeout(self, w3):
        w3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("timed out")
        handle = DeploymentHandle(w3, "Fusion", "0xabc", nonce=5, gas_limit=1, timeout=1)

        with pytest.raises(ConfirmationFailure, match="not included"):
            handle.wait_for_deployment()


class TestSigner:

    def test_nonce_counts_pending(self, w3):
        w3.eth.get_transaction_count.return_value = 7
        account = Mock()
        account.address = DEPLOYER

        assert Signer(w3, account).get_nonce() == 7
        w3.eth.get_transaction_count.assert_called_once_with(DEPLOYER, 'pending')
