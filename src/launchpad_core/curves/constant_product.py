from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from loguru import logger

from launchpad_core.common.enums import PricingModelType
from launchpad_core.common.math import Numeric, to_decimal
from launchpad_core.common.model import AmmPool, BuyResult, SimulationResult
from launchpad_core.curves.base import PricingModel
from launchpad_core.curves.helpers.constant_product import ConstantProductHelper as helper


class ConstantProductCurve(PricingModel):
    """
    The legacy launch pool: the creator deposits 'deposit_eth' together with the
    share of supply that makes the opening price match the FDV. The rest of the
    supply is burned and never reaches any pool.

        eth_reserve * token_reserve = k
    """

    model_type = PricingModelType.CONSTANT_PRODUCT

    def __init__(
        self,
        fdv_eth: Numeric,
        deposit_eth: Numeric,
        total_supply: Numeric,
        pool: Optional[AmmPool] = None,
    ):
        self._fdv_eth = to_decimal(fdv_eth)
        self._deposit_eth = to_decimal(deposit_eth)
        self._total_supply = to_decimal(total_supply)
        self._pool = pool or helper.initialize(self._fdv_eth, self._deposit_eth, self._total_supply)
        logger.debug(
            f"Constant-product pool: {self._pool.eth_reserve} ETH / {self._pool.token_reserve} tokens, "
            f"burned={self._pool.burned_tokens}"
        )

    @property
    def pool(self) -> AmmPool:
        return self._pool

    @property
    def fdv_eth(self) -> Decimal:
        return self._fdv_eth

    @property
    def deposit_eth(self) -> Decimal:
        return self._deposit_eth

    @property
    def total_supply(self) -> Decimal:
        return self._total_supply

    @property
    def token_liquidity(self) -> Decimal:
        return self._total_supply - self._pool.burned_tokens

    @property
    def burned_tokens(self) -> Decimal:
        return self._pool.burned_tokens

    def describe(self) -> Dict[str, Any]:
        return {
            "fdv_eth": self._fdv_eth,
            "deposit_eth": self._deposit_eth,
            "token_liquidity": self.token_liquidity,
            "burned_tokens": self.burned_tokens,
            "k": self._pool.k,
        }

    def spot_price(self) -> Decimal:
        return self._pool.price

    def remaining_inventory(self) -> Decimal:
        return self._pool.token_reserve

    def apply_buy(self, eth_in: Numeric) -> BuyResult:
        """
        Adds 'eth_in' to the ETH reserve and pays out tokens so that k is unchanged.

        :raises ValueError: for negative input
        """
        eth_in = to_decimal(eth_in)
        if eth_in < 0:
            raise ValueError("ETH in must be non-negative.")

        price_before = self._pool.price
        new_eth_reserve, new_token_reserve = helper.reserves_after_eth_in(self._pool, eth_in)
        tokens_out = self._pool.token_reserve - new_token_reserve

        self._pool.eth_reserve = new_eth_reserve
        self._pool.token_reserve = new_token_reserve

        price_after = self._pool.price
        impact = helper.price_impact(price_before, price_after)
        logger.debug(f"Buy {eth_in} ETH -> {tokens_out} tokens, impact {impact}")

        return BuyResult(
            eth_in=eth_in,
            tokens_out=tokens_out,
            new_price=price_after,
            price_change_pct=impact * Decimal("100"),
            pool_tokens_remaining=new_token_reserve,
            price_before=price_before,
            pool_eth_after=new_eth_reserve,
        )


def initialize(fdv_eth: Decimal, deposit_eth: Decimal, total_supply: Decimal) -> AmmPool:
    """Seeds a legacy pool."""
    return helper.initialize(fdv_eth, deposit_eth, total_supply)


def simulate_sequence(
    fdv_eth: Decimal,
    deposit_eth: Decimal,
    total_supply: Decimal,
    eth_amounts: Iterable[Numeric],
    label: Optional[str] = None,
) -> SimulationResult:
    """Runs a buy sequence against a freshly seeded legacy pool."""
    curve = ConstantProductCurve(fdv_eth, deposit_eth, total_supply)
    return curve.simulate_sequence((to_decimal(a) for a in eth_amounts), label=label)
