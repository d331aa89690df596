"""Deployment data model: targets, gas estimates and results."""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from web3 import Web3

from .exceptions import DeploymentAborted

UINT256_MAX = 2**256 - 1


@dataclass(frozen=True)
class DeploymentTarget:
    name: str
    constructor_args: Tuple[Any, ...] = ()

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Deployment target needs a contract name")
        # frozen dataclass: normalise list arguments in place
        object.__setattr__(self, "constructor_args", tuple(self.constructor_args))


@dataclass(frozen=True)
class GasEstimate:
    succeeded: bool
    value: Optional[int] = None
    failure_reason: Optional[str] = None

    @classmethod
    def ok(cls, value: int) -> "GasEstimate":
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Gas estimate must be an integer, got {value!r}")
        if not 0 <= value <= UINT256_MAX:
            raise ValueError(f"Gas estimate out of uint256 range: {value}")
        return cls(succeeded=True, value=value)

    @classmethod
    def failed(cls, reason: str) -> "GasEstimate":
        return cls(succeeded=False, failure_reason=reason or "unknown error")


@dataclass(frozen=True)
class DeploymentResult:
    target: DeploymentTarget
    deployed_address: str
    nonce: int
    gas_limit: int
    tx_hash: str = ""

    def __post_init__(self):
        if not Web3.is_address(self.deployed_address):
            raise ValueError(f"Not a contract address: {self.deployed_address!r}")
        object.__setattr__(
            self, "deployed_address", Web3.to_checksum_address(self.deployed_address)
        )


@dataclass(frozen=True)
class DeploymentOutcome:
    """Tagged result of deploying a single target."""

    target: DeploymentTarget
    succeeded: bool
    result: Optional[DeploymentResult] = None
    error: Optional[DeploymentAborted] = field(default=None, compare=False)

    @classmethod
    def deployed(cls, result: DeploymentResult) -> "DeploymentOutcome":
        return cls(target=result.target, succeeded=True, result=result)

    @classmethod
    def aborted(cls, target: DeploymentTarget, error: DeploymentAborted) -> "DeploymentOutcome":
        return cls(target=target, succeeded=False, error=error)
