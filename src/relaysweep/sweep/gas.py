"""Gas-safe amount computation for native balances."""

import logging
from typing import Optional

from relaysweep.sweep.base import GasBudget

logger = logging.getLogger(__name__)

# Gas limits used for submissions
GAS_LIMIT_TRANSFER = 21000
GAS_LIMIT_WRAP = 100000

# Extra gas units held back on top of the fee
SAFETY_BUFFER_GAS = 30000

DEFAULT_GAS_PRICE_WEI = 20_000_000_000  # 20 gwei


class GasBudgetCalculator:
    """Reserve gas plus a safety buffer out of a native balance.

    Example:
        calc = GasBudgetCalculator()
        budget = calc.compute(10**18, 20 * 10**9)
        # budget.max_safe_for_wrap == 997_400_000_000_000_000
    """

    def __init__(self, default_gas_price: int = DEFAULT_GAS_PRICE_WEI):
        if default_gas_price < 0:
            raise ValueError("default_gas_price must be non-negative")
        self.default_gas_price = default_gas_price

    def compute(self, balance: int, gas_price: Optional[int] = None) -> GasBudget:
        """Compute the movable amounts for a wrap and for a transfer.

        Args:
            balance: Native balance in wei
            gas_price: Gas price in wei (None = default)

        Returns:
            GasBudget with both amounts clamped at zero
        """
        if gas_price is None:
            gas_price = self.default_gas_price
        if balance < 0 or gas_price < 0:
            raise ValueError("balance and gas_price must be non-negative")

        buffer = gas_price * SAFETY_BUFFER_GAS
        budget = GasBudget(
            max_safe_for_wrap=_movable(balance, gas_price * GAS_LIMIT_WRAP + buffer),
            max_safe_for_transfer=_movable(balance, gas_price * GAS_LIMIT_TRANSFER + buffer),
        )
        logger.debug(
            f"Gas budget for balance {balance} at {gas_price} wei: "
            f"wrap={budget.max_safe_for_wrap} transfer={budget.max_safe_for_transfer}"
        )
        return budget


def _movable(balance: int, reserved: int) -> int:
    return balance - reserved if balance > reserved else 0
