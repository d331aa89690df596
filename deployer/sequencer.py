"""
Deployment Sequencer
Simulate-then-deploy orchestration for an ordered batch of contracts
"""

from typing import List, Optional, Sequence
from loguru import logger

from blockchain.nonce_manager import SequenceCursor
from utils.gas_calculator import GasCalculator
from utils.simulation import DeploymentSimulator
from .exceptions import (
    ConfirmationFailure,
    ConfigurationError,
    DeploymentError,
    SimulationFailure,
    SubmissionFailure,
)
from .models import DeploymentOutcome, DeploymentResult, DeploymentTarget, GasEstimate


class DeploymentSequencer:
    """
    Deploys contracts one at a time with explicitly sequenced nonces

    Every target is gas-simulated before the first transaction is sent;
    a single failed simulation aborts the batch. Deployments then run
    strictly in order, each with a freshly estimated gas limit plus the
    configured safety margin. Nothing is retried.
    """

    def __init__(
        self,
        client,
        gas_calculator: Optional[GasCalculator] = None,
        simulator: Optional[DeploymentSimulator] = None
    ):
        """
        Initialize Deployment Sequencer

        Args:
            client: Execution client
            gas_calculator: Safety margin policy (20% when None)
            simulator: Gas simulator (built on client when None)
        """
        self.client = client
        self.gas_calculator = gas_calculator or GasCalculator()
        self.simulator = simulator or DeploymentSimulator(client)

    def estimate(self, target: DeploymentTarget, caller_address: str) -> GasEstimate:
        """
        Estimate deployment gas for one target; never raises

        Args:
            target: Contract and constructor arguments
            caller_address: Address that would send the deployment

        Returns:
            Tagged gas estimate
        """
        return self.simulator.estimate(target, caller_address)

    def preflight(self, targets: Sequence[DeploymentTarget], caller_address: str) -> List[GasEstimate]:
        """
        Simulate every target before anything is sent

        Args:
            targets: Targets in deployment order
            caller_address: Deployer address

        Returns:
            One successful estimate per target

        Raises:
            SimulationFailure: naming the first failing target
        """
        logger.info(f"Simulating {len(targets)} deployments from {caller_address}")

        estimates = self.simulator.simulate_batch(targets, caller_address)
        failures = [
            (target.name, estimate.failure_reason)
            for target, estimate in estimates
            if not estimate.succeeded
        ]

        if failures:
            first_name, first_reason = failures[0]
            logger.error(f"Pre-flight failed for {len(failures)}/{len(targets)} contracts")
            raise SimulationFailure(first_name, first_reason, failures=failures)

        for target, estimate in estimates:
            logger.info(f"  {target.name}: ~{estimate.value} gas")

        return [estimate for _, estimate in estimates]

    def run(
        self,
        targets: Sequence[DeploymentTarget],
        signer,
        starting_nonce: Optional[int] = None
    ) -> List[DeploymentResult]:
        """
        Simulate and deploy a batch of contracts in order

        Args:
            targets: Targets in deployment order
            signer: Deployer signer (address, get_nonce)
            starting_nonce: First nonce to use (signer's pending nonce when None)

        Returns:
            One result per target, in target order

        Raises:
            SimulationFailure: a pre-flight or deploy-time estimate failed
            SubmissionFailure: the node rejected a deployment
            ConfirmationFailure: a deployment reverted or was not included
            ConfigurationError: starting_nonce is negative or not an integer
        """
        targets = list(targets)
        if not targets:
            logger.warning("Nothing to deploy")
            return []

        if starting_nonce is not None:
            try:
                cursor = SequenceCursor(starting_nonce)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid starting nonce: {e}") from e

        self.preflight(targets, signer.address)

        if starting_nonce is None:
            try:
                cursor = SequenceCursor.from_signer(signer)
            except Exception as e:
                raise DeploymentError(f"Could not read nonce for {signer.address}: {e}") from e

        logger.info(f"Deploying {len(targets)} contracts from {signer.address}, starting at nonce {cursor.current}")

        results: List[DeploymentResult] = []
        for target in targets:
            outcome = self._deploy_target(target, signer, cursor.current, results)
            if not outcome.succeeded:
                logger.error(f"{outcome.error} ({len(results)} contracts deployed before the failure)")
                raise outcome.error

            results.append(outcome.result)
            cursor.advance()

        logger.success(f"✅ Deployed {len(results)} contracts, next nonce {cursor.current}")
        return results

    def _deploy_target(
        self,
        target: DeploymentTarget,
        signer,
        nonce: int,
        deployed: Sequence[DeploymentResult]
    ) -> DeploymentOutcome:
        """Estimate, submit and confirm a single deployment"""
        estimate = self.estimate(target, signer.address)
        if not estimate.succeeded:
            return DeploymentOutcome.aborted(
                target,
                SimulationFailure(target.name, estimate.failure_reason, nonce=nonce, deployed=deployed)
            )

        gas_limit = self.gas_calculator.apply_safety_margin(estimate.value)
        logger.info(f"Deploying {target.name} (nonce {nonce}, gas limit {gas_limit})")

        try:
            handle = self.client.deploy_contract(
                target.name,
                target.constructor_args,
                gas_limit=gas_limit,
                nonce=nonce,
                signer=signer
            )
        except Exception as e:
            return self._aborted(target, SubmissionFailure, e, nonce, deployed)

        try:
            address = handle.wait_for_deployment()
        except ConfirmationFailure as e:
            # handle does not know what was deployed before it
            error = ConfirmationFailure(target.name, e.reason, nonce=nonce, deployed=deployed)
            error.__cause__ = e
            return DeploymentOutcome.aborted(target, error)
        except Exception as e:
            return self._aborted(target, ConfirmationFailure, e, nonce, deployed)

        result = DeploymentResult(
            target=target,
            deployed_address=address,
            nonce=nonce,
            gas_limit=gas_limit,
            tx_hash=str(getattr(handle, 'tx_hash', '') or '')
        )
        logger.success(f"{target.name} deployed at {result.deployed_address} (nonce {nonce})")
        return DeploymentOutcome.deployed(result)

    @staticmethod
    def _aborted(target, error_cls, exc, nonce, deployed) -> DeploymentOutcome:
        error = error_cls(target.name, str(exc) or type(exc).__name__, nonce=nonce, deployed=deployed)
        error.__cause__ = exc
        return DeploymentOutcome.aborted(target, error)
