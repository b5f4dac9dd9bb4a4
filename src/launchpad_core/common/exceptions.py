from decimal import Decimal
from typing import Optional


class InvalidCurveParametersError(ValueError):
    """Raised when a launch configuration cannot describe a valid pool."""


class OutOfRangeError(ValueError):
    """
    Raised when a buy would push the price past the position's upper bound.

    The pool state is left untouched so callers can stop or cap the simulation.
    """

    def __init__(self, eth_in: Decimal, max_eth_in: Optional[Decimal] = None):
        self.eth_in = eth_in
        self.max_eth_in = max_eth_in
        message = f"Buy of {eth_in} ETH exceeds the upper price bound"
        if max_eth_in is not None:
            message += f" (less than {max_eth_in} ETH can be filled in range)"
        super().__init__(message)
