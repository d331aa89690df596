"""Deployment configuration loading."""

import json
from typing import Dict

from .exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = 'config/deploy_config.json'


def load_config(path: str = DEFAULT_CONFIG_PATH) -> Dict:
    """Read the deployment configuration JSON."""
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Deployment config not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Deployment config {path} is not valid JSON: {e}") from e
