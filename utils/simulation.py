"""
Deployment Simulator
Estimates deployment gas before anything is broadcast
"""

from typing import List, Sequence, Tuple
from loguru import logger

from blockchain.transaction_builder import build_deployment_payload
from deployer.models import DeploymentTarget, GasEstimate


class DeploymentSimulator:
    """
    Simulates contract deployments with eth_estimateGas
    Failures are returned as values so a whole batch can be checked first
    """

    def __init__(self, client):
        """
        Initialize Deployment Simulator

        Args:
            client: Execution client (get_contract_factory, estimate_gas)
        """
        self.client = client

    def estimate(self, target: DeploymentTarget, caller_address: str) -> GasEstimate:
        """
        Estimate gas for deploying one target

        Args:
            target: Contract and constructor arguments
            caller_address: Address that would send the deployment

        Returns:
            Successful estimate, or a failed one with the reason
        """
        try:
            factory = self.client.get_contract_factory(target.name)
            payload = build_deployment_payload(factory, target.constructor_args, caller_address)
            estimate = GasEstimate.ok(self.client.estimate_gas(caller_address, payload))
        except Exception as e:
            reason = str(e) or type(e).__name__
            logger.warning(f"Gas simulation failed for {target.name}: {reason}")
            return GasEstimate.failed(reason)

        logger.debug(f"Gas estimate for {target.name}: {estimate.value}")
        return estimate

    def simulate_batch(
        self,
        targets: Sequence[DeploymentTarget],
        caller_address: str
    ) -> List[Tuple[DeploymentTarget, GasEstimate]]:
        """Estimate every target in order"""
        return [(target, self.estimate(target, caller_address)) for target in targets]
