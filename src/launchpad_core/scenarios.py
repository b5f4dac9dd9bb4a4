"""
Sample launch scenarios for both protocol versions.

These are the parameter grids used to choose the deployed defaults; they are
plain data so any reporter can consume the results.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from launchpad_core.common.constants import DEFAULT_TOTAL_SUPPLY
from launchpad_core.common.enums import PricingModelType
from launchpad_core.common.model import SimulationResult
from launchpad_core.curves.factory import create_pricing_model


@dataclass(frozen=True)
class Scenario:
    label: str
    model_type: PricingModelType
    fdv_eth: Decimal
    buy_amounts: List[Decimal] = field(default_factory=list)
    price_range_multiplier: Optional[Decimal] = None
    deposit_eth: Optional[Decimal] = None
    total_supply: Decimal = DEFAULT_TOTAL_SUPPLY

    def run(self, stop_on_out_of_range: bool = False) -> SimulationResult:
        model = create_pricing_model(
            self.model_type,
            total_supply=self.total_supply,
            fdv_eth=self.fdv_eth,
            price_range_multiplier=self.price_range_multiplier,
            deposit_eth=self.deposit_eth,
        )
        return model.simulate_sequence(
            self.buy_amounts, stop_on_out_of_range=stop_on_out_of_range, label=self.label
        )


def _d(*values: str) -> List[Decimal]:
    return [Decimal(v) for v in values]


CONCENTRATED_BUYS = _d("0.001", "0.01", "0.1", "1", "5", "10")
LEGACY_BUYS = _d("0.001", "0.01", "0.1", "1")

CONCENTRATED_SCENARIOS = [
    Scenario(
        label="FDV: 20 ETH | Range: 10x",
        model_type=PricingModelType.CONCENTRATED,
        fdv_eth=Decimal("20"),
        price_range_multiplier=Decimal("10"),
        buy_amounts=CONCENTRATED_BUYS,
    ),
    Scenario(
        label="FDV: 20 ETH | Range: 100x",
        model_type=PricingModelType.CONCENTRATED,
        fdv_eth=Decimal("20"),
        price_range_multiplier=Decimal("100"),
        buy_amounts=CONCENTRATED_BUYS,
    ),
]

# Legacy grid: V1 priced the token at deposit / supply, V2 pinned the price to an FDV
LEGACY_SCENARIOS = [
    Scenario("V1: deposit = price", PricingModelType.CONSTANT_PRODUCT, Decimal("0.001"),
             LEGACY_BUYS, deposit_eth=Decimal("0.001")),
    Scenario("V2: 0.001 ETH deposit, 20 ETH FDV", PricingModelType.CONSTANT_PRODUCT, Decimal("20"),
             LEGACY_BUYS, deposit_eth=Decimal("0.001")),
    Scenario("V2: 0.01 ETH deposit, 20 ETH FDV", PricingModelType.CONSTANT_PRODUCT, Decimal("20"),
             LEGACY_BUYS, deposit_eth=Decimal("0.01")),
    Scenario("V2: 0.1 ETH deposit, 20 ETH FDV", PricingModelType.CONSTANT_PRODUCT, Decimal("20"),
             LEGACY_BUYS, deposit_eth=Decimal("0.1")),
    Scenario("V2: 1 ETH deposit, 20 ETH FDV", PricingModelType.CONSTANT_PRODUCT, Decimal("20"),
             LEGACY_BUYS, deposit_eth=Decimal("1")),
    Scenario("V2: 0.1 ETH deposit, 50 ETH FDV", PricingModelType.CONSTANT_PRODUCT, Decimal("50"),
             LEGACY_BUYS, deposit_eth=Decimal("0.1")),
]

ALL_SCENARIOS = {
    PricingModelType.CONCENTRATED: CONCENTRATED_SCENARIOS,
    PricingModelType.CONSTANT_PRODUCT: LEGACY_SCENARIOS,
}


def run_scenarios(model_type: Optional[PricingModelType] = None, stop_on_out_of_range: bool = False) -> List[SimulationResult]:
    """Runs the sample grid for one model type, or both when 'model_type' is None."""
    if model_type is None:
        scenarios = CONCENTRATED_SCENARIOS + LEGACY_SCENARIOS
    else:
        scenarios = ALL_SCENARIOS[model_type]
    return [s.run(stop_on_out_of_range=stop_on_out_of_range) for s in scenarios]
