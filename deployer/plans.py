"""
Deployment Plans
Named, ordered sets of contracts to deploy together
"""

from typing import Dict, List
from loguru import logger

from .exceptions import ConfigurationError, PlanNotFoundError
from .models import DeploymentTarget


def available_plans(config: Dict) -> List[str]:
    return sorted(config.get('plans', {}))


def load_plan(config: Dict, name: str) -> List[DeploymentTarget]:
    """
    Build the targets of a configured plan

    Args:
        config: Deployment configuration
        name: Plan name

    Returns:
        Targets in deployment order
    """
    plans = config.get('plans', {})
    if name not in plans:
        raise PlanNotFoundError(
            f"Unknown deployment plan {name!r}; available: {', '.join(available_plans(config))}"
        )

    contracts = plans[name].get('contracts', [])
    if not contracts:
        raise ConfigurationError(f"Deployment plan {name!r} lists no contracts")

    targets = []
    for entry in contracts:
        if 'name' not in entry:
            raise ConfigurationError(f"Deployment plan {name!r} has an entry without a name")
        targets.append(DeploymentTarget(entry['name'], tuple(entry.get('args', ()))))

    logger.debug(f"Plan {name}: {', '.join(t.name for t in targets)}")
    return targets


def parse_contract_list(value: str) -> List[DeploymentTarget]:
    """Targets without constructor arguments from 'A,B,C'"""
    names = [name.strip() for name in value.split(',') if name.strip()]
    if not names:
        raise ConfigurationError("No contract names given")
    return [DeploymentTarget(name) for name in names]
