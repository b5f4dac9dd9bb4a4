from decimal import Decimal
from typing import Optional

from launchpad_core.common.constants import DEFAULT_FDV_ETH, DEFAULT_TOTAL_SUPPLY, PRICE_RANGE_MULTIPLIER
from launchpad_core.common.enums import PricingModelType
from launchpad_core.common.math import Numeric, to_decimal
from launchpad_core.common.model import CurveParameters
from launchpad_core.curves.base import PricingModel
from launchpad_core.curves.concentrated import ConcentratedLiquidityCurve
from launchpad_core.curves.constant_product import ConstantProductCurve


def create_pricing_model(
    model_type: PricingModelType,
    total_supply: Numeric,
    fdv_eth: Numeric,
    price_range_multiplier: Optional[Numeric] = None,
    deposit_eth: Optional[Numeric] = None,
    **kwargs,
) -> PricingModel:
    """
    Builds either pricing model from plain launch inputs.

    CONCENTRATED needs 'price_range_multiplier', CONSTANT_PRODUCT needs 'deposit_eth'.
    Extra kwargs are passed to the concentrated curve as options.
    """
    supply = to_decimal(total_supply)
    fdv = to_decimal(fdv_eth)

    if model_type == PricingModelType.CONCENTRATED:
        if price_range_multiplier is None:
            raise ValueError("Concentrated model requires 'price_range_multiplier'.")
        params = CurveParameters(
            total_supply=supply,
            fdv_eth=fdv,
            price_range_multiplier=to_decimal(price_range_multiplier),
        )
        return ConcentratedLiquidityCurve(params, **kwargs)

    if model_type == PricingModelType.CONSTANT_PRODUCT:
        if deposit_eth is None:
            raise ValueError("Constant-product model requires 'deposit_eth'.")
        if kwargs:
            raise TypeError(f"Unsupported options for constant-product model: {sorted(kwargs)}")
        return ConstantProductCurve(fdv, to_decimal(deposit_eth), supply)

    raise NotImplementedError(f"No pricing model for {model_type}")


def default_parameters() -> CurveParameters:
    """Launch defaults as deployed: 1B supply, 20 ETH FDV, 100x range."""
    return CurveParameters(
        total_supply=Decimal(DEFAULT_TOTAL_SUPPLY),
        fdv_eth=Decimal(DEFAULT_FDV_ETH),
        price_range_multiplier=Decimal(PRICE_RANGE_MULTIPLIER),
    )
