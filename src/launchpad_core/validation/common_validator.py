from typing import Any, Dict

from launchpad_core.common.enums import PricingModelType
from launchpad_core.curves.base import PricingModel
from launchpad_core.validation.concentrated_validator import ConcentratedCurveValidator
from launchpad_core.validation.constant_product_validator import ConstantProductValidator


class CommonValidator:
    """
    Entry point for validating any PricingModel. Dispatches on the model type
    and adds a summary of the outcome.
    """

    @staticmethod
    def run_all_validations(model: "PricingModel") -> Dict[str, Any]:
        """
        Returns a dict with keys: errors, warnings, info, valid
        """
        if model.model_type == PricingModelType.CONCENTRATED:
            results = ConcentratedCurveValidator.run_all_validations(model)
        elif model.model_type == PricingModelType.CONSTANT_PRODUCT:
            results = ConstantProductValidator.run_all_validations(model)
        else:
            raise NotImplementedError(f"No validator for {model.model_type}")

        results["info"]["model_type"] = str(model.model_type)
        results["valid"] = not results["errors"]
        return results
