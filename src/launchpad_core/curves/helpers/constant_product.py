from decimal import Decimal
from typing import Tuple

from launchpad_core.common.exceptions import InvalidCurveParametersError
from launchpad_core.common.math import Numeric, to_decimal
from launchpad_core.common.model import AmmPool


class ConstantProductHelper:
    """x*y=k math for the legacy pool where the creator seeds ETH and part of the supply."""

    @staticmethod
    def initialize(fdv_eth: Numeric, deposit_eth: Numeric, total_supply: Numeric) -> AmmPool:
        """
        Seeds a pool so that its opening price matches the FDV:
            token_liquidity = deposit / fdv * supply
            burned          = supply - token_liquidity
            k               = deposit * token_liquidity
        """
        total_supply = to_decimal(total_supply)
        fdv_eth = to_decimal(fdv_eth)
        deposit_eth = to_decimal(deposit_eth)

        if total_supply <= 0:
            raise InvalidCurveParametersError("Total supply must be positive.")
        if fdv_eth <= 0:
            raise InvalidCurveParametersError("FDV must be positive.")
        if deposit_eth <= 0:
            raise InvalidCurveParametersError("ETH deposit must be positive.")
        if deposit_eth > fdv_eth:
            raise InvalidCurveParametersError("ETH deposit cannot exceed the FDV.")

        token_liquidity = (deposit_eth / fdv_eth) * total_supply
        return AmmPool(
            eth_reserve=deposit_eth,
            token_reserve=token_liquidity,
            k=deposit_eth * token_liquidity,
            burned_tokens=total_supply - token_liquidity,
        )

    @staticmethod
    def reserves_after_eth_in(pool: AmmPool, eth_in: Decimal) -> Tuple[Decimal, Decimal]:
        """:return: (new_eth_reserve, new_token_reserve) keeping k constant"""
        new_eth_reserve = pool.eth_reserve + eth_in
        return new_eth_reserve, pool.k / new_eth_reserve

    @staticmethod
    def price_impact(price_before: Decimal, price_after: Decimal) -> Decimal:
        """(after - before) / before"""
        if price_before == 0:
            return Decimal("0")
        return (price_after - price_before) / price_before
