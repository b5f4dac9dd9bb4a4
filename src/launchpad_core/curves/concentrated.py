from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from loguru import logger

from launchpad_core.common.constants import BPS_DENOMINATOR, CREATOR_FEE_BPS, PIPS_DENOMINATOR
from launchpad_core.common.enums import PricingModelType
from launchpad_core.common.exceptions import InvalidCurveParametersError, OutOfRangeError
from launchpad_core.common.math import Numeric, to_decimal, to_sqrt_price_x96
from launchpad_core.common.model import BuyResult, CurveParameters, LiquidityState, SimulationResult
from launchpad_core.curves.base import PricingModel
from launchpad_core.curves.helpers.concentrated import ConcentratedLiquidityHelper as helper


class ConcentratedLiquidityCurve(PricingModel):
    """
    A single-sided concentrated-liquidity position holding the whole supply,
    placed between the FDV price and 'price_range_multiplier' times that price.

    The creator deposits no ETH. Buyers push the sqrt price up:
        sqrt(P_new) = sqrt(P_old) + eth_in / L
        tokens_out  = L * (1/sqrt(P_old) - 1/sqrt(P_new))

    Once the price reaches the upper bound every token has been sold and any
    further buy is out of range.
    """

    model_type = PricingModelType.CONCENTRATED

    def __init__(self, params: CurveParameters, state: Optional[LiquidityState] = None, **kwargs):
        """
        :param params: CurveParameters - supply, FDV and price range of the launch
        :param state: LiquidityState - optional existing state, e.g. mid-simulation
        :param kwargs: options:
          - lp_fee_pips: pool fee in hundredths of a bip taken from each buy (default 0)
          - creator_fee_bps: creator's share of LP fees in bps (default 8000)

        :raises InvalidCurveParametersError: for a fee outside its range
        """
        self._params = params
        self._bounds = helper.compute_price_bounds(params)
        self._liquidity = helper.compute_liquidity(params)
        self._state = state or LiquidityState(
            liquidity=self._liquidity,
            sqrt_price_current=self._bounds.sqrt_price_lower,
            token_reserve=params.total_supply,
            eth_reserve=Decimal("0"),
        )
        self.accrued_fees_eth = Decimal("0")

        self.options = {
            "lp_fee_pips": 0,
            "creator_fee_bps": CREATOR_FEE_BPS,
        }
        for k, v in kwargs.items():
            if k not in self.options:
                raise TypeError(f"Unknown option for {type(self).__name__}: {k}")
            self.options[k] = v

        lp_fee_pips = self.options["lp_fee_pips"]
        if not 0 <= lp_fee_pips < PIPS_DENOMINATOR:
            raise InvalidCurveParametersError(
                f"LP fee must be in [0, {PIPS_DENOMINATOR}) pips, got {lp_fee_pips}."
            )
        creator_fee_bps = self.options["creator_fee_bps"]
        if not 0 <= creator_fee_bps <= BPS_DENOMINATOR:
            raise InvalidCurveParametersError(
                f"Creator fee must be in [0, {BPS_DENOMINATOR}] bps, got {creator_fee_bps}."
            )

        logger.debug(
            f"Concentrated curve: supply={params.total_supply} fdv={params.fdv_eth} ETH "
            f"range={params.price_range_multiplier}x L={self._liquidity}"
        )

    @property
    def params(self) -> CurveParameters:
        return self._params

    @property
    def bounds(self):
        return self._bounds

    @property
    def liquidity(self) -> Decimal:
        return self._liquidity

    @property
    def state(self) -> LiquidityState:
        return self._state

    @property
    def total_supply(self) -> Decimal:
        return self._params.total_supply

    @property
    def creator_fees_eth(self) -> Decimal:
        """Creator's cut of the LP fees accrued so far."""
        return self.accrued_fees_eth * Decimal(self.options["creator_fee_bps"]) / Decimal(BPS_DENOMINATOR)

    def describe(self) -> Dict[str, Any]:
        return {
            "fdv_eth": self._params.fdv_eth,
            "price_range_multiplier": self._params.price_range_multiplier,
            "price_lower": self._bounds.price_lower,
            "price_upper": self._bounds.price_upper,
            "liquidity": self._liquidity,
            "lp_fee_pips": self.options["lp_fee_pips"],
        }

    def spot_price(self) -> Decimal:
        return self._state.price

    def sqrt_price_x96(self) -> int:
        """Current price in the Q64.96 encoding the pool manager stores."""
        return to_sqrt_price_x96(self.spot_price())

    def remaining_inventory(self) -> Decimal:
        """
        L * (1/sqrt(P) - 1/sqrt(Pb)). Never negative, zero at the upper bound.
        """
        remaining = helper.token_amount_between(
            self._state.sqrt_price_current, self._bounds.sqrt_price_upper, self._liquidity
        )
        return max(remaining, Decimal("0"))

    def position_composition(self) -> Tuple[Decimal, Decimal]:
        """
        Token and ETH held by the position at the current price.
        At the lower bound this is (total_supply, 0).
        """
        eth = helper.eth_amount_between(
            self._bounds.sqrt_price_lower, self._state.sqrt_price_current, self._liquidity
        )
        return self.remaining_inventory(), eth

    def max_eth_in(self) -> Decimal:
        """ETH, fee included, that would move the price exactly to the upper bound."""
        net = helper.eth_amount_between(
            self._state.sqrt_price_current, self._bounds.sqrt_price_upper, self._liquidity
        )
        fee_fraction = Decimal(self.options["lp_fee_pips"]) / Decimal(PIPS_DENOMINATOR)
        return net / (Decimal("1") - fee_fraction)

    def apply_buy(self, eth_in: Numeric) -> BuyResult:
        """
        Buys tokens with 'eth_in' ETH. The pool fee, if any, is taken first and the
        rest moves the price.

        :raises ValueError: for negative input
        :raises OutOfRangeError: if the buy would cross the upper price bound
        """
        eth_in = to_decimal(eth_in)
        if eth_in < 0:
            raise ValueError("ETH in must be non-negative.")

        sqrt_price_old = self._state.sqrt_price_current
        price_before = self._state.price

        if eth_in == 0:
            return BuyResult(
                eth_in=eth_in,
                tokens_out=Decimal("0"),
                new_price=price_before,
                price_change_pct=Decimal("0"),
                pool_tokens_remaining=self.remaining_inventory(),
                price_before=price_before,
                pool_eth_after=self._state.eth_reserve,
            )

        eth_net, fee_eth = helper.split_fee(eth_in, self.options["lp_fee_pips"])
        sqrt_price_new = helper.sqrt_price_after_eth_in(sqrt_price_old, self._liquidity, eth_net)
        if helper.exceeds_upper_bound(sqrt_price_new, self._bounds.sqrt_price_upper):
            raise OutOfRangeError(eth_in, self.max_eth_in())

        tokens_out = helper.token_amount_between(sqrt_price_old, sqrt_price_new, self._liquidity)
        tokens_out = min(tokens_out, self.remaining_inventory())
        new_price = sqrt_price_new * sqrt_price_new

        self._state.sqrt_price_current = sqrt_price_new
        self._state.token_reserve -= tokens_out
        self._state.eth_reserve += eth_net
        self.accrued_fees_eth += fee_eth

        price_change_pct = ((new_price - price_before) / price_before) * Decimal("100")
        logger.debug(f"Buy {eth_in} ETH -> {tokens_out} tokens, price {price_before} -> {new_price}")

        return BuyResult(
            eth_in=eth_in,
            tokens_out=tokens_out,
            new_price=new_price,
            price_change_pct=price_change_pct,
            pool_tokens_remaining=self.remaining_inventory(),
            price_before=price_before,
            pool_eth_after=self._state.eth_reserve,
            fee_eth=fee_eth,
        )


def compute_liquidity(params: CurveParameters) -> Decimal:
    """L for a launch configuration."""
    return helper.compute_liquidity(params)


def simulate_sequence(
    params: CurveParameters,
    eth_amounts: Iterable[Numeric],
    stop_on_out_of_range: bool = False,
    label: Optional[str] = None,
    **kwargs,
) -> SimulationResult:
    """Runs a buy sequence against a fresh position built from 'params'."""
    curve = ConcentratedLiquidityCurve(params, **kwargs)
    return curve.simulate_sequence(
        (to_decimal(a) for a in eth_amounts),
        stop_on_out_of_range=stop_on_out_of_range,
        label=label,
    )
