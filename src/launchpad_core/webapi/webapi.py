from decimal import Decimal
from enum import Enum
from typing import List, Optional

from flask import jsonify
from flask_openapi3 import Info, Tag
from flask_openapi3 import OpenAPI
from loguru import logger
from pydantic import BaseModel, Field

from launchpad_core.common.constants import DEFAULT_FDV_ETH, DEFAULT_TOTAL_SUPPLY, PRICE_RANGE_MULTIPLIER
from launchpad_core.common.enums import PricingModelType
from launchpad_core.common.exceptions import InvalidCurveParametersError
from launchpad_core.common.model import CurveParameters
from launchpad_core.curves.concentrated import ConcentratedLiquidityCurve
from launchpad_core.curves.factory import create_pricing_model
from launchpad_core.reporting.reporters import JsonReporter


info = Info(title="Launch Pricing API", version="1.0.0")
app = OpenAPI(__name__, info=info)


class ModelType(Enum):
    concentrated = "concentrated"
    constant_product = "constant_product"


class SimulateRequest(BaseModel):
    model_type: ModelType = Field(ModelType.concentrated, description="Pricing model to simulate")
    total_supply: Decimal = Field(DEFAULT_TOTAL_SUPPLY, description="Token supply in whole tokens")
    fdv_eth: Decimal = Field(DEFAULT_FDV_ETH, description="Fully diluted valuation in ETH")
    price_range_multiplier: Optional[Decimal] = Field(
        PRICE_RANGE_MULTIPLIER, description="Upper/lower price ratio (concentrated only)"
    )
    deposit_eth: Optional[Decimal] = Field(None, description="Creator ETH deposit (constant_product only)")
    lp_fee_pips: int = Field(0, ge=0, lt=1_000_000, description="Pool fee (concentrated only)")
    buy_amounts: List[Decimal] = Field(description="ETH per buy, applied in order")
    stop_on_out_of_range: bool = Field(False, description="Stop at the first unfillable buy")


simulate_tag = Tag(
    name="Launch Simulation",
    description="Run an ordered buy sequence against a fresh launch pool",
)


@app.post("/curve/simulate", summary="Simulate Buys", tags=[simulate_tag])
def simulate(body: SimulateRequest):
    """
    Applies the buys cumulatively and returns every fill, including out-of-range rows.
    """
    model_type = PricingModelType.from_str(body.model_type.value)
    kwargs = {"lp_fee_pips": body.lp_fee_pips} if model_type == PricingModelType.CONCENTRATED else {}
    try:
        model = create_pricing_model(
            model_type,
            total_supply=body.total_supply,
            fdv_eth=body.fdv_eth,
            price_range_multiplier=body.price_range_multiplier,
            deposit_eth=body.deposit_eth,
            **kwargs,
        )
        if any(a < 0 for a in body.buy_amounts):
            raise ValueError("Buy amounts must be non-negative.")
    except ValueError as e:
        logger.info(f"Rejected simulation request: {e}")
        return jsonify({"error": str(e)}), 400

    result = model.simulate_sequence(body.buy_amounts, stop_on_out_of_range=body.stop_on_out_of_range)
    return jsonify(JsonReporter().to_dict(result))


class CurveStatusQuery(BaseModel):
    total_supply: Decimal = Field(DEFAULT_TOTAL_SUPPLY, description="Token supply in whole tokens")
    fdv_eth: Decimal = Field(DEFAULT_FDV_ETH, description="Fully diluted valuation in ETH")
    price_range_multiplier: Decimal = Field(PRICE_RANGE_MULTIPLIER, description="Upper/lower price ratio")


curve_status_tag = Tag(
    name="Launch Curve Status",
    description="Get the price bounds and liquidity of a fresh concentrated position",
)


@app.get("/curve/status", summary="Curve Status", tags=[curve_status_tag])
def status(query: CurveStatusQuery):
    """
    Return the price range, liquidity and token/ETH composition at the lower bound,
    plus the ETH needed to sell the whole position out.
    """
    try:
        params = CurveParameters(
            total_supply=query.total_supply,
            fdv_eth=query.fdv_eth,
            price_range_multiplier=query.price_range_multiplier,
        )
    except InvalidCurveParametersError as e:
        return jsonify({"error": str(e)}), 400

    curve = ConcentratedLiquidityCurve(params)
    tokens, eth = curve.position_composition()
    return jsonify({
        "price_lower": str(curve.bounds.price_lower),
        "price_upper": str(curve.bounds.price_upper),
        "sqrt_price_lower": str(curve.bounds.sqrt_price_lower),
        "sqrt_price_upper": str(curve.bounds.sqrt_price_upper),
        "liquidity": str(curve.liquidity),
        "sqrt_price_x96": str(curve.sqrt_price_x96()),
        "position_tokens": str(tokens),
        "position_eth": str(eth),
        "max_eth_in": str(curve.max_eth_in()),
    })


if __name__ == "__main__":
    app.run(debug=True)
