from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Union

from launchpad_core.common.constants import TOKEN_DECIMALS, WEI_PER_ETH
from launchpad_core.common.enums import FillStatus, PricingModelType
from launchpad_core.common.exceptions import InvalidCurveParametersError
from launchpad_core.common.math import to_decimal


@dataclass(frozen=True)
class CurveParameters:
    """One token's launch configuration for the concentrated-liquidity position."""
    total_supply: Decimal
    fdv_eth: Decimal
    price_range_multiplier: Decimal

    def __post_init__(self):
        for name in ("total_supply", "fdv_eth", "price_range_multiplier"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, to_decimal(value))

        if self.total_supply is None or self.total_supply <= Decimal('0'):
            raise InvalidCurveParametersError("Total supply must be positive.")
        if self.fdv_eth is None or self.fdv_eth <= Decimal('0'):
            raise InvalidCurveParametersError("FDV must be positive.")
        if self.price_range_multiplier is None or self.price_range_multiplier <= Decimal('1'):
            raise InvalidCurveParametersError("Price range multiplier must be greater than 1.")

    @property
    def initial_price(self) -> Decimal:
        """ETH per token at the FDV, i.e. the lower bound of the range."""
        return self.fdv_eth / self.total_supply

    @classmethod
    def from_contract(
        cls,
        total_supply_wei: int,
        initial_fdv_wei: int,
        price_range_multiplier: Union[int, Decimal],
        decimals: int = TOKEN_DECIMALS,
    ) -> "CurveParameters":
        """
        Builds parameters from the raw integers a factory read returns
        (`totalSupply`, `initialFdv`, `PRICE_RANGE_MULTIPLIER`).
        """
        return cls(
            total_supply=Decimal(total_supply_wei) / (Decimal(10) ** decimals),
            fdv_eth=Decimal(initial_fdv_wei) / Decimal(WEI_PER_ETH),
            price_range_multiplier=Decimal(price_range_multiplier),
        )


@dataclass(frozen=True)
class PriceBounds:
    """Lower and upper price of the position, with their square roots."""
    price_lower: Decimal
    price_upper: Decimal
    sqrt_price_lower: Decimal
    sqrt_price_upper: Decimal


@dataclass
class LiquidityState:
    """Runtime state of a simulated concentrated-liquidity position."""
    liquidity: Decimal
    sqrt_price_current: Decimal
    token_reserve: Decimal = Decimal('0')
    eth_reserve: Decimal = Decimal('0')

    @property
    def price(self) -> Decimal:
        return self.sqrt_price_current * self.sqrt_price_current


@dataclass
class AmmPool:
    """Reserves of a legacy x*y=k pool."""
    eth_reserve: Decimal
    token_reserve: Decimal
    k: Decimal
    burned_tokens: Decimal = Decimal('0')

    @property
    def price(self) -> Decimal:
        return self.eth_reserve / self.token_reserve


@dataclass(frozen=True)
class BuyResult:
    """Effect of one simulated buy."""
    eth_in: Decimal
    tokens_out: Decimal
    new_price: Decimal
    price_change_pct: Decimal
    pool_tokens_remaining: Decimal
    status: FillStatus = FillStatus.FILLED
    price_before: Optional[Decimal] = None
    pool_eth_after: Optional[Decimal] = None
    fee_eth: Decimal = Decimal('0')

    @property
    def filled(self) -> bool:
        return self.status == FillStatus.FILLED


@dataclass
class SimulationResult:
    """Holds the aggregated results of a buy sequence."""
    model_type: PricingModelType
    label: str = ""
    total_supply: Decimal = Decimal('0')
    results: List[BuyResult] = field(default_factory=list)
    initial_price: Decimal = Decimal('0')
    final_price: Decimal = Decimal('0')
    tokens_sold: Decimal = Decimal('0')
    tokens_remaining: Decimal = Decimal('0')
    stopped_early: bool = False
    metadata: Dict = field(default_factory=dict)

    @property
    def filled_results(self) -> List[BuyResult]:
        return [r for r in self.results if r.filled]


@dataclass
class LaunchConfig:
    """Mirror of the factory's per-token record, as returned by `getTokenInfo`."""
    token: str
    creator: str
    position_id: int
    total_supply: int
    initial_fdv: int
    created_at: int
    name: str = ""
    symbol: str = ""
    decimals: int = TOKEN_DECIMALS

    @property
    def supply_tokens(self) -> Decimal:
        return Decimal(self.total_supply) / (Decimal(10) ** self.decimals)

    @property
    def fdv_eth(self) -> Decimal:
        return Decimal(self.initial_fdv) / Decimal(WEI_PER_ETH)

    @property
    def initial_price_eth(self) -> Decimal:
        if self.total_supply <= 0:
            raise InvalidCurveParametersError("Total supply must be positive.")
        return self.fdv_eth / self.supply_tokens

    @property
    def created_at_date(self) -> datetime:
        return datetime.fromtimestamp(self.created_at, tz=timezone.utc)

    def to_curve_parameters(self, price_range_multiplier: Union[int, Decimal]) -> CurveParameters:
        return CurveParameters.from_contract(
            self.total_supply,
            self.initial_fdv,
            price_range_multiplier,
            decimals=self.decimals,
        )
