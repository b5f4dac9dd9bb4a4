from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from loguru import logger

from launchpad_core.common.enums import FillStatus, PricingModelType
from launchpad_core.common.exceptions import OutOfRangeError
from launchpad_core.common.math import Numeric, to_decimal
from launchpad_core.common.model import BuyResult, SimulationResult


class PricingModel(ABC):
    """Abstract base class defining the interface shared by both launch pricing models."""

    model_type: PricingModelType

    @property
    @abstractmethod
    def total_supply(self) -> Decimal:
        """Returns the token's total supply."""
        pass

    @abstractmethod
    def spot_price(self) -> Decimal:
        """
        Returns the current price in ETH per token.

        :return: Decimal: The price at the current state.
        """
        pass

    @abstractmethod
    def remaining_inventory(self) -> Decimal:
        """
        Returns how many tokens are still available to buyers.

        :return: Decimal: Tokens left in the pool.
        """
        pass

    @abstractmethod
    def apply_buy(self, eth_in: Decimal) -> BuyResult:
        """
        Executes a buy of 'eth_in' ETH against the pool, updating the internal state,
        and returns a BuyResult.

        :param eth_in: Decimal - ETH the buyer sends.
        :return: A BuyResult detailing tokens received, new price, price change, etc.
        :raises OutOfRangeError: if the model cannot fill the buy.
        """
        pass

    def describe(self) -> Dict[str, Any]:
        """Static facts about the pool, copied into every SimulationResult."""
        return {}

    def _out_of_range_result(self, eth_in: Decimal) -> BuyResult:
        """
        Result recorded for a buy the pool refused. Tokens out is zero and the
        state is unchanged.
        """
        price = self.spot_price()
        return BuyResult(
            eth_in=eth_in,
            tokens_out=Decimal("0"),
            new_price=price,
            price_change_pct=Decimal("0"),
            pool_tokens_remaining=self.remaining_inventory(),
            status=FillStatus.OUT_OF_RANGE,
            price_before=price,
        )

    def simulate_sequence(
        self,
        eth_amounts: Iterable[Numeric],
        stop_on_out_of_range: bool = False,
        label: Optional[str] = None,
    ) -> SimulationResult:
        """
        Applies buys cumulatively in the given order. Each buy sees the state left by
        the ones before it.

        Buys that cannot be filled are recorded with status OUT_OF_RANGE. By default the
        sequence continues with the next amount; with 'stop_on_out_of_range' it ends there.

        :param eth_amounts: ordered ETH amounts
        :param stop_on_out_of_range: stop at the first unfillable buy
        :param label: scenario name carried into the result
        :return: SimulationResult
        """
        result = SimulationResult(
            model_type=self.model_type,
            label=label or str(self.model_type),
            total_supply=self.total_supply,
            initial_price=self.spot_price(),
            metadata=self.describe(),
        )

        for amount in eth_amounts:
            eth_in = to_decimal(amount)
            try:
                buy = self.apply_buy(eth_in)
            except OutOfRangeError as e:
                logger.warning(f"{result.label}: {e}")
                result.results.append(self._out_of_range_result(eth_in))
                if stop_on_out_of_range:
                    result.stopped_early = True
                    break
                continue
            result.results.append(buy)
            result.tokens_sold += buy.tokens_out

        result.final_price = self.spot_price()
        result.tokens_remaining = self.remaining_inventory()
        return result
