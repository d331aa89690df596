"""
Deployer Package
Sequenced, simulate-first deployment of contract plans
"""

from .exceptions import (
    ArtifactNotFoundError,
    ConfigurationError,
    ConfirmationFailure,
    DeploymentAborted,
    DeploymentError,
    NetworkNotFoundError,
    PlanNotFoundError,
    SignerUnavailableError,
    SimulationFailure,
    SubmissionFailure,
    VerificationError,
)
from .models import DeploymentOutcome, DeploymentResult, DeploymentTarget, GasEstimate

__all__ = [
    'ArtifactNotFoundError',
    'ConfigurationError',
    'ConfirmationFailure',
    'DeploymentAborted',
    'DeploymentError',
    'NetworkNotFoundError',
    'PlanNotFoundError',
    'SignerUnavailableError',
    'SimulationFailure',
    'SubmissionFailure',
    'VerificationError',
    'DeploymentOutcome',
    'DeploymentResult',
    'DeploymentTarget',
    'GasEstimate'
]
