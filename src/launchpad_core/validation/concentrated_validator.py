from decimal import Decimal
from typing import Any, Dict, List, Optional

from launchpad_core.common.constants import BPS_DENOMINATOR, CREATOR_FEE_BPS, PIPS_DENOMINATOR
from launchpad_core.common.exceptions import OutOfRangeError
from launchpad_core.common.math import decimal_rel_close
from launchpad_core.curves.concentrated import ConcentratedLiquidityCurve


class ConcentratedCurveValidator:
    """
    Specialized validator for the ConcentratedLiquidityCurve.
    Performs:
      1) Param checks (supply, FDV, range multiplier, fee)
      2) Boundary tests (zero buy, full inventory at start, out-of-range detection)
      3) Scenario tests (small buy sequence, price monotonicity, token conservation)

    Each step returns a dict with:
      {
        "errors": [str...],
        "warnings": [str...],
        "info": {...}
      }
    and 'run_all_validations' aggregates them into a single result.

    Boundary and scenario tests run on a fresh copy of the curve, so the
    curve being validated is never mutated.
    """

    @staticmethod
    def validate_params(
        total_supply: Optional[Decimal],
        fdv_eth: Optional[Decimal],
        price_range_multiplier: Optional[Decimal],
        options: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Checks raw launch inputs before a CurveParameters is built:
          - total_supply > 0
          - fdv_eth > 0
          - price_range_multiplier > 1
          - 0 <= lp_fee_pips < 1e6
          - 0 <= creator_fee_bps <= 1e4
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        if total_supply is None or total_supply <= 0:
            errors.append("ConcentratedCurve: 'total_supply' must be > 0.")

        if fdv_eth is None or fdv_eth <= 0:
            errors.append("ConcentratedCurve: 'fdv_eth' must be > 0.")

        if price_range_multiplier is None or price_range_multiplier <= 1:
            errors.append("ConcentratedCurve: 'price_range_multiplier' must be > 1.")
        elif price_range_multiplier < 2:
            warnings.append(
                f"ConcentratedCurve: range multiplier {price_range_multiplier} is narrow; "
                "the pool will sell out after a small amount of ETH."
            )

        lp_fee_pips = options.get("lp_fee_pips", 0)
        if lp_fee_pips < 0 or lp_fee_pips >= PIPS_DENOMINATOR:
            errors.append(f"ConcentratedCurve: 'lp_fee_pips' must be in [0, {PIPS_DENOMINATOR}).")

        creator_fee_bps = options.get("creator_fee_bps", CREATOR_FEE_BPS)
        if creator_fee_bps < 0 or creator_fee_bps > BPS_DENOMINATOR:
            errors.append(f"ConcentratedCurve: 'creator_fee_bps' must be in [0, {BPS_DENOMINATOR}].")

        info["param_summary"] = {
            "total_supply": str(total_supply),
            "fdv_eth": str(fdv_eth),
            "price_range_multiplier": str(price_range_multiplier),
            "lp_fee_pips": str(lp_fee_pips),
        }

        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def _fresh_copy(curve: ConcentratedLiquidityCurve) -> ConcentratedLiquidityCurve:
        return ConcentratedLiquidityCurve(curve.params, **curve.options)

    @staticmethod
    def boundary_tests(curve: ConcentratedLiquidityCurve) -> Dict[str, Any]:
        """
        Calls a few boundary conditions on a fresh position:
          - L > 0
          - remaining inventory at the lower bound equals total supply, ETH side is zero
          - apply_buy(0) leaves the price unchanged
          - a buy larger than max_eth_in is reported as out of range
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        fresh = ConcentratedCurveValidator._fresh_copy(curve)

        if fresh.liquidity <= 0:
            errors.append(f"Liquidity is not positive: {fresh.liquidity}")

        # 1) Full inventory at the lower bound
        tokens, eth = fresh.position_composition()
        if not decimal_rel_close(tokens, fresh.total_supply):
            errors.append(f"Inventory at lower bound {tokens} != total supply {fresh.total_supply}")
        if eth != 0:
            errors.append(f"Position holds {eth} ETH at the lower bound; expected 0.")

        # 2) Zero-size buy
        try:
            price_before = fresh.spot_price()
            zero = fresh.apply_buy(Decimal("0"))
            if zero.tokens_out != 0 or fresh.spot_price() != price_before:
                errors.append("Zero-size buy changed the pool state.")
        except Exception as e:
            errors.append(f"Exception calling apply_buy(0): {e}")

        # 3) Out-of-range detection
        max_eth = fresh.max_eth_in()
        info["max_eth_in"] = str(max_eth)
        try:
            fresh.apply_buy(max_eth * Decimal("2"))
            errors.append("Buy of twice max_eth_in was filled instead of reported out of range.")
        except OutOfRangeError:
            pass
        except Exception as e:
            errors.append(f"Unexpected exception for out-of-range buy: {e}")

        info["boundary_tests_run"] = True
        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def scenario_tests(curve: ConcentratedLiquidityCurve) -> Dict[str, Any]:
        """
        Runs a small buy sequence of 1%, 10% and 30% of max_eth_in and checks that
          - price never decreases
          - sold + remaining equals total supply
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        fresh = ConcentratedCurveValidator._fresh_copy(curve)
        max_eth = fresh.max_eth_in()
        amounts = [max_eth * Decimal(f) for f in ("0.01", "0.1", "0.3")]

        try:
            result = fresh.simulate_sequence(amounts, stop_on_out_of_range=True)
        except Exception as e:
            errors.append(f"Exception in scenario sequence: {e}")
            return {"errors": errors, "warnings": warnings, "info": info}

        last_price = result.initial_price
        for i, buy in enumerate(result.results):
            if not buy.filled:
                errors.append(f"Scenario buy {i} ({buy.eth_in} ETH) was out of range.")
                continue
            if buy.new_price < last_price:
                errors.append(f"Price decreased on scenario buy {i}.")
            last_price = buy.new_price

        if not decimal_rel_close(result.tokens_sold + result.tokens_remaining, fresh.total_supply):
            errors.append(
                f"Tokens sold {result.tokens_sold} + remaining {result.tokens_remaining} "
                f"!= total supply {fresh.total_supply}"
            )

        info["scenario_tokens_sold"] = str(result.tokens_sold)
        info["scenario_final_price"] = str(result.final_price)
        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def run_all_validations(curve: ConcentratedLiquidityCurve) -> Dict[str, Any]:
        """
        Aggregates:
          - param check
          - boundary tests
          - scenario tests
        Returns a dict with keys: errors, warnings, info
        """
        results = {
            "errors": [],
            "warnings": [],
            "info": {}
        }

        params = curve.params
        param_check = ConcentratedCurveValidator.validate_params(
            params.total_supply, params.fdv_eth, params.price_range_multiplier, curve.options
        )
        steps = [param_check]
        # fresh copies cannot be built from invalid options
        if not param_check["errors"]:
            steps.append(ConcentratedCurveValidator.boundary_tests(curve))
            steps.append(ConcentratedCurveValidator.scenario_tests(curve))

        for step in steps:
            results["errors"].extend(step["errors"])
            results["warnings"].extend(step["warnings"])
            results["info"].update(step["info"])

        return results
