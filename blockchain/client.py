"""
Execution Client
Node-facing operations consumed by the deployment sequencer
"""

from typing import Dict, List, Optional, Sequence
from web3 import Web3
from web3.exceptions import TimeExhausted
from loguru import logger

from deployer.exceptions import ConfirmationFailure, SignerUnavailableError
from .contract_manager import ContractManager
from .transaction_builder import TransactionBuilder


class DeploymentHandle:
    """
    A broadcast deployment transaction awaiting inclusion
    """

    def __init__(
        self,
        w3: Web3,
        name: str,
        tx_hash: str,
        nonce: int,
        gas_limit: int,
        timeout: float = 300
    ):
        self.w3 = w3
        self.name = name
        self.tx_hash = tx_hash
        self.nonce = nonce
        self.gas_limit = gas_limit
        self.timeout = timeout

        self.receipt = None
        self.address: Optional[str] = None

    def wait_for_deployment(self) -> str:
        """
        Block until the deployment is included

        Returns:
            Checksummed contract address
        """
        if self.address is not None:
            return self.address

        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(self.tx_hash, timeout=self.timeout)
        except TimeExhausted as e:
            raise ConfirmationFailure(
                self.name,
                f"transaction {self.tx_hash} not included after {self.timeout}s",
                nonce=self.nonce
            ) from e

        if receipt['status'] != 1:
            raise ConfirmationFailure(
                self.name,
                f"transaction {self.tx_hash} reverted (gas used {receipt['gasUsed']} of {self.gas_limit})",
                nonce=self.nonce
            )

        contract_address = receipt['contractAddress']
        if not contract_address:
            raise ConfirmationFailure(
                self.name,
                f"receipt for {self.tx_hash} has no contract address",
                nonce=self.nonce
            )

        self.receipt = receipt
        self.address = Web3.to_checksum_address(contract_address)

        logger.debug(f"{self.name} included in block {receipt['blockNumber']}, gas used {receipt['gasUsed']}")
        return self.address


class ExecutionClient:
    """
    Thin wrapper over Web3 exposing the operations a deployment run needs:
    gas estimation, contract factories, signed deployments and signers
    """

    def __init__(
        self,
        w3: Web3,
        contract_manager: ContractManager,
        wallet_manager,
        confirmation_timeout: float = 300,
        chain_id: Optional[int] = None
    ):
        """
        Initialize Execution Client

        Args:
            w3: Connected Web3 instance
            contract_manager: Artifact loader
            wallet_manager: Source of deployer signers
            confirmation_timeout: Seconds to wait for each receipt
            chain_id: Chain ID to sign for (queried from the node when None)
        """
        self.w3 = w3
        self.contract_manager = contract_manager
        self.wallet_manager = wallet_manager
        self.confirmation_timeout = confirmation_timeout
        self.tx_builder = TransactionBuilder(w3, chain_id)

    def estimate_gas(self, from_address: str, payload: Dict) -> int:
        """
        Estimate gas for a payload without broadcasting it

        Args:
            from_address: Simulated sender
            payload: Call dict (at least 'data')

        Returns:
            Estimated gas units
        """
        call = dict(payload)
        call['from'] = Web3.to_checksum_address(from_address)
        return self.w3.eth.estimate_gas(call)

    def get_contract_factory(self, name: str):
        """Contract factory for a compiled contract"""
        return self.contract_manager.get_contract_factory(name)

    def get_signers(self) -> List:
        """Signers available to send deployments"""
        return self.wallet_manager.get_signers(self.w3)

    def deploy_contract(
        self,
        name: str,
        args: Sequence,
        gas_limit: int,
        nonce: int,
        signer=None
    ) -> DeploymentHandle:
        """
        Sign and broadcast a contract deployment

        Args:
            name: Contract name
            args: Constructor arguments
            gas_limit: Gas limit for the deployment
            nonce: Nonce to send with
            signer: Sending signer (first available signer when None)

        Returns:
            Handle to await the deployed address
        """
        if signer is None:
            signers = self.get_signers()
            if not signers:
                raise SignerUnavailableError("No signer configured")
            signer = signers[0]

        factory = self.get_contract_factory(name)
        tx = self.tx_builder.build_deployment_tx(factory, args, signer.address, gas_limit, nonce)

        signed_tx = signer.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        tx_hash_hex = Web3.to_hex(tx_hash)

        logger.info(f"{name} deployment sent: {tx_hash_hex} (nonce {nonce}, gas {gas_limit})")

        return DeploymentHandle(
            self.w3,
            name,
            tx_hash_hex,
            nonce,
            gas_limit,
            timeout=self.confirmation_timeout
        )
