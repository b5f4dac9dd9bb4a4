from decimal import Decimal
from typing import Tuple

from launchpad_core.common.constants import PIPS_DENOMINATOR
from launchpad_core.common.exceptions import InvalidCurveParametersError
from launchpad_core.common.model import CurveParameters, PriceBounds


# sqrt prices this close to the upper bound cannot be told apart from it
UPPER_BOUND_REL_TOL = Decimal("1e-18")


class ConcentratedLiquidityHelper:
    """
    Square-root-price math for a single-sided position between [Pa, Pb].

    With the token as token0 and ETH as token1, at a price P inside the range:
        token_amount = L * (1/sqrt(P) - 1/sqrt(Pb))
        eth_amount   = L * (sqrt(P) - sqrt(Pa))

    At P = Pa the position holds only tokens, at P = Pb only ETH.
    """

    @staticmethod
    def compute_price_bounds(params: CurveParameters) -> PriceBounds:
        """
        priceLower = fdv / supply, priceUpper = priceLower * multiplier.
        """
        price_lower = params.fdv_eth / params.total_supply
        price_upper = price_lower * params.price_range_multiplier
        return PriceBounds(
            price_lower=price_lower,
            price_upper=price_upper,
            sqrt_price_lower=price_lower.sqrt(),
            sqrt_price_upper=price_upper.sqrt(),
        )

    @staticmethod
    def compute_liquidity(params: CurveParameters) -> Decimal:
        """
        Solves totalSupply = L * (1/sqrt(Pa) - 1/sqrt(Pb)) for L.

        :raises InvalidCurveParametersError: if the range is empty or inverted
        """
        bounds = ConcentratedLiquidityHelper.compute_price_bounds(params)
        denominator = (Decimal("1") / bounds.sqrt_price_lower) - (Decimal("1") / bounds.sqrt_price_upper)
        if denominator <= 0:
            raise InvalidCurveParametersError(
                f"Price range multiplier {params.price_range_multiplier} leaves no room for liquidity."
            )
        return params.total_supply / denominator

    @staticmethod
    def token_amount_between(sqrt_price_a: Decimal, sqrt_price_b: Decimal, liquidity: Decimal) -> Decimal:
        """Token (token0) held by L between two sqrt prices, in either order."""
        if sqrt_price_a > sqrt_price_b:
            sqrt_price_a, sqrt_price_b = sqrt_price_b, sqrt_price_a
        return liquidity * ((Decimal("1") / sqrt_price_a) - (Decimal("1") / sqrt_price_b))

    @staticmethod
    def eth_amount_between(sqrt_price_a: Decimal, sqrt_price_b: Decimal, liquidity: Decimal) -> Decimal:
        """ETH (token1) held by L between two sqrt prices, in either order."""
        return liquidity * abs(sqrt_price_b - sqrt_price_a)

    @staticmethod
    def sqrt_price_after_eth_in(sqrt_price_current: Decimal, liquidity: Decimal, eth_in: Decimal) -> Decimal:
        """
        Adding ETH moves the sqrt price up linearly:
            eth_in = L * (sqrt(P_new) - sqrt(P_old))
        """
        return sqrt_price_current + (eth_in / liquidity)

    @staticmethod
    def exceeds_upper_bound(sqrt_price_new: Decimal, sqrt_price_upper: Decimal) -> bool:
        """
        True when the new sqrt price is past the upper bound, or so close to it
        that the difference is below the working precision.
        """
        if sqrt_price_new > sqrt_price_upper:
            return True
        return (sqrt_price_upper - sqrt_price_new) <= (UPPER_BOUND_REL_TOL * sqrt_price_upper)

    @staticmethod
    def split_fee(eth_in: Decimal, fee_pips: int) -> Tuple[Decimal, Decimal]:
        """
        Takes the pool fee out of the input before it moves the price.
        :return: (eth_after_fee, fee_eth)
        """
        if fee_pips < 0 or fee_pips >= PIPS_DENOMINATOR:
            raise ValueError(f"Fee must be in [0, {PIPS_DENOMINATOR}) pips, got {fee_pips}.")
        fee_eth = eth_in * Decimal(fee_pips) / Decimal(PIPS_DENOMINATOR)
        return eth_in - fee_eth, fee_eth
