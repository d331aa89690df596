"""
Gas Calculator
Safety margins and cost estimates for contract deployments
"""

from decimal import Decimal
from typing import Dict, Optional
from web3 import Web3
from loguru import logger

DEFAULT_SAFETY_MARGIN_PERCENT = 20


class GasCalculator:
    """
    Turns raw gas estimates into gas limits with a fixed safety margin
    """

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize Gas Calculator

        Args:
            config: Deployment configuration (reads gas_settings.safety_margin_percent)
        """
        gas_settings = (config or {}).get('gas_settings', {})
        margin = gas_settings.get('safety_margin_percent', DEFAULT_SAFETY_MARGIN_PERCENT)

        if isinstance(margin, bool) or not isinstance(margin, int) or margin < 0:
            raise ValueError(f"safety_margin_percent must be a non-negative integer, got {margin!r}")

        self.safety_margin_percent = margin

        logger.debug(f"Gas Calculator initialized ({margin}% safety margin)")

    def apply_safety_margin(self, estimate: int) -> int:
        """
        Effective gas limit for an estimate

        Integer arithmetic, rounded down: 999,999 -> 1,199,998 at 20%.

        Args:
            estimate: Estimated gas units

        Returns:
            Gas limit including the margin
        """
        if estimate < 0:
            raise ValueError(f"Gas estimate cannot be negative: {estimate}")
        return estimate * (100 + self.safety_margin_percent) // 100

    def estimate_deployment_cost(self, w3: Web3, gas_limit: int) -> Optional[Decimal]:
        """
        Worst-case deployment cost at the current gas price

        Args:
            w3: Web3 instance
            gas_limit: Total gas limit

        Returns:
            Cost in native currency, or None if the gas price is unavailable
        """
        try:
            gas_price = w3.eth.gas_price
        except Exception as e:
            logger.warning(f"Could not read gas price: {e}")
            return None

        cost = Decimal(w3.from_wei(gas_limit * gas_price, 'ether'))
        logger.debug(f"Gas price {w3.from_wei(gas_price, 'gwei')} gwei -> cost {cost}")
        return cost
