import pytest

from decimal import Decimal

from launchpad_core.common.model import AmmPool
from launchpad_core.curves.constant_product import ConstantProductCurve
from launchpad_core.validation.constant_product_validator import ConstantProductValidator


SUPPLY = Decimal("1000000000")


def test_validate_params_all_valid():
    result = ConstantProductValidator.validate_params(Decimal("20"), Decimal("0.1"), SUPPLY)
    assert result["errors"] == []
    assert result["warnings"] == []
    assert result["info"]["liquidity_share"] == "0.005"
    assert result["info"]["param_summary"]["deposit_eth"] == "0.1"


@pytest.mark.parametrize(
    "fdv, deposit, supply, fragment",
    [
        (Decimal("0"), Decimal("0.1"), SUPPLY, "'fdv_eth' must be > 0"),
        (None, Decimal("0.1"), SUPPLY, "'fdv_eth' must be > 0"),
        (Decimal("20"), Decimal("0"), SUPPLY, "'deposit_eth' must be > 0"),
        (Decimal("20"), Decimal("0.1"), Decimal("-1"), "'total_supply' must be > 0"),
        (Decimal("1"), Decimal("2"), SUPPLY, "cannot exceed 'fdv_eth'"),
    ]
)
def test_validate_params_errors(fdv, deposit, supply, fragment):
    result = ConstantProductValidator.validate_params(fdv, deposit, supply)
    assert any(fragment in e for e in result["errors"])


def test_validate_params_tiny_liquidity_share_warns():
    """0.001 ETH into a 20 ETH FDV puts 0.005% of supply in the pool."""
    result = ConstantProductValidator.validate_params(Decimal("20"), Decimal("0.001"), SUPPLY)
    assert result["errors"] == []
    assert len(result["warnings"]) == 1
    assert "extreme price impact" in result["warnings"][0]


def test_scenario_tests_pass():
    curve = ConstantProductCurve(Decimal("20"), Decimal("0.1"), SUPPLY)
    result = ConstantProductValidator.scenario_tests(curve)
    assert result["errors"] == []
    assert Decimal(result["info"]["scenario_tokens_sold"]) > 0


def test_scenario_tests_use_fresh_pool():
    """A pool that has already traded is validated from its launch state."""
    curve = ConstantProductCurve(Decimal("20"), Decimal("0.1"), SUPPLY)
    curve.apply_buy(Decimal("1"))
    reserve = curve.pool.token_reserve

    result = ConstantProductValidator.scenario_tests(curve)
    assert result["errors"] == []
    assert curve.pool.token_reserve == reserve


def test_run_all_validations_with_custom_pool():
    """
    Only the launch inputs are validated, not an injected pool.
    """
    pool = AmmPool(eth_reserve=Decimal("1"), token_reserve=Decimal("1"), k=Decimal("1"))
    curve = ConstantProductCurve(Decimal("20"), Decimal("0.1"), SUPPLY, pool=pool)
    result = ConstantProductValidator.run_all_validations(curve)
    assert result["errors"] == []
    assert "liquidity_share" in result["info"]
