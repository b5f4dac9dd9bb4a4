import pytest

from unittest.mock import MagicMock

from launchpad_core.common.enums import PricingModelType
from launchpad_core.curves.factory import create_pricing_model
from launchpad_core.validation.common_validator import CommonValidator


@pytest.mark.parametrize(
    "model_type, kwargs",
    [
        (PricingModelType.CONCENTRATED, {"price_range_multiplier": "100"}),
        (PricingModelType.CONSTANT_PRODUCT, {"deposit_eth": "0.1"}),
    ]
)
def test_run_all_validations_valid(model_type, kwargs):
    model = create_pricing_model(model_type, "1000000000", "20", **kwargs)
    result = CommonValidator.run_all_validations(model)
    assert result["valid"] is True
    assert result["errors"] == []
    assert result["info"]["model_type"] == str(model_type)


def test_run_all_validations_invalid_marks_result():
    """
    A narrow range is only a warning, but a fee outside [0, 1e6) pips is an error.
    """
    model = create_pricing_model(
        PricingModelType.CONCENTRATED, "1000", "1", price_range_multiplier="1.5"
    )
    model.options["lp_fee_pips"] = -1
    result = CommonValidator.run_all_validations(model)
    assert result["valid"] is False
    assert result["warnings"]
    assert any("lp_fee_pips" in e for e in result["errors"])


def test_run_all_validations_unknown_model():
    model = MagicMock()
    model.model_type = "other"
    with pytest.raises(NotImplementedError):
        CommonValidator.run_all_validations(model)
