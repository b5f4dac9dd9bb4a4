from decimal import Decimal
from typing import Any, Dict, List, Optional

from launchpad_core.common.math import decimal_rel_close
from launchpad_core.curves.constant_product import ConstantProductCurve


class ConstantProductValidator:
    """
    Validator for the legacy ConstantProductCurve: param checks, boundary tests
    and a small scenario checking that k is conserved.
    """

    @staticmethod
    def validate_params(
        fdv_eth: Optional[Decimal],
        deposit_eth: Optional[Decimal],
        total_supply: Optional[Decimal],
    ) -> Dict[str, Any]:
        """
        Checks that:
          - fdv_eth > 0, total_supply > 0
          - 0 < deposit_eth <= fdv_eth
        Warns when almost all of the supply would be burned.
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        if fdv_eth is None or fdv_eth <= 0:
            errors.append("ConstantProduct: 'fdv_eth' must be > 0.")
        if total_supply is None or total_supply <= 0:
            errors.append("ConstantProduct: 'total_supply' must be > 0.")
        if deposit_eth is None or deposit_eth <= 0:
            errors.append("ConstantProduct: 'deposit_eth' must be > 0.")
        elif fdv_eth is not None and fdv_eth > 0:
            if deposit_eth > fdv_eth:
                errors.append("ConstantProduct: 'deposit_eth' cannot exceed 'fdv_eth'.")
            else:
                liquidity_share = deposit_eth / fdv_eth
                info["liquidity_share"] = str(liquidity_share)
                if liquidity_share < Decimal("0.001"):
                    warnings.append(
                        f"ConstantProduct: only {liquidity_share * 100}% of supply enters the pool; "
                        "expect extreme price impact."
                    )

        info["param_summary"] = {
            "fdv_eth": str(fdv_eth),
            "deposit_eth": str(deposit_eth),
            "total_supply": str(total_supply),
        }

        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def scenario_tests(curve: ConstantProductCurve) -> Dict[str, Any]:
        """
        Buys 10%, 50% and 100% of the deposit on a fresh pool and checks k,
        price monotonicity and that burned + liquidity equals total supply.
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        fresh = ConstantProductCurve(curve.fdv_eth, curve.deposit_eth, curve.total_supply)
        k = fresh.pool.k

        if not decimal_rel_close(fresh.burned_tokens + fresh.token_liquidity, fresh.total_supply):
            errors.append("Burned tokens plus pool liquidity do not add up to total supply.")

        amounts = [fresh.deposit_eth * Decimal(f) for f in ("0.1", "0.5", "1")]
        try:
            result = fresh.simulate_sequence(amounts)
        except Exception as e:
            errors.append(f"Exception in scenario sequence: {e}")
            return {"errors": errors, "warnings": warnings, "info": info}

        last_price = result.initial_price
        for i, buy in enumerate(result.results):
            if buy.new_price < last_price:
                errors.append(f"Price decreased on scenario buy {i}.")
            last_price = buy.new_price

        product = fresh.pool.eth_reserve * fresh.pool.token_reserve
        if not decimal_rel_close(product, k):
            errors.append(f"k drifted from {k} to {product}.")

        info["scenario_tokens_sold"] = str(result.tokens_sold)
        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def run_all_validations(curve: ConstantProductCurve) -> Dict[str, Any]:
        results = {
            "errors": [],
            "warnings": [],
            "info": {}
        }

        param_check = ConstantProductValidator.validate_params(
            curve.fdv_eth, curve.deposit_eth, curve.total_supply
        )
        scenario = ConstantProductValidator.scenario_tests(curve)

        for step in (param_check, scenario):
            results["errors"].extend(step["errors"])
            results["warnings"].extend(step["warnings"])
            results["info"].update(step["info"])

        return results
