"""
Deployment Exceptions
Error hierarchy for configuration problems and aborted deployment runs
"""

from typing import Optional, Sequence, Tuple


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when networks, plans, artifacts or keys are misconfigured."""

    pass


class NetworkNotFoundError(ConfigurationError):
    """Raised when the requested network is not in the registry."""

    pass


class PlanNotFoundError(ConfigurationError):
    """Raised when the requested deployment plan is not configured."""

    pass


class SignerUnavailableError(ConfigurationError):
    """Raised when no deployer key is available."""

    pass


class ArtifactNotFoundError(ConfigurationError, FileNotFoundError):
    """Raised when no compiled artifact exists for a contract name."""

    pass


class DeploymentAborted(DeploymentError):
    """
    Raised when a deployment run stops before every target is deployed

    Attributes:
        target: Name of the contract that failed
        reason: Underlying failure message
        nonce: Nonce in use when the failure happened (None before the cursor exists)
        deployed: Results confirmed on-chain before the failure
    """

    kind = "Deployment failure"

    def __init__(
        self,
        target: str,
        reason: str,
        nonce: Optional[int] = None,
        deployed: Sequence = ()
    ):
        self.target = target
        self.reason = reason
        self.nonce = nonce
        self.deployed = tuple(deployed)
        super().__init__(f"{self.kind} for {target}: {reason}")


class SimulationFailure(DeploymentAborted):
    """Gas estimation was rejected for at least one target."""

    kind = "Gas simulation failed"

    def __init__(
        self,
        target: str,
        reason: str,
        failures: Sequence[Tuple[str, str]] = (),
        nonce: Optional[int] = None,
        deployed: Sequence = ()
    ):
        self.failures = tuple(failures) or ((target, reason),)
        super().__init__(target, reason, nonce=nonce, deployed=deployed)


class SubmissionFailure(DeploymentAborted):
    """The network rejected a deployment transaction."""

    kind = "Submission failed"


class ConfirmationFailure(DeploymentAborted):
    """A deployment transaction reverted or was never included."""

    kind = "Confirmation failed"


class VerificationError(DeploymentError):
    """Raised when an explorer refuses or cannot take a source verification."""

    pass
