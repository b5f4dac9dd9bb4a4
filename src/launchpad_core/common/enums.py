from enum import Enum


class PricingModelType(Enum):
    CONCENTRATED = "CONCENTRATED"
    CONSTANT_PRODUCT = "CONSTANT_PRODUCT"

    @classmethod
    def from_str(cls, model_str):
        normalized = model_str.upper().replace("-", "_")
        if normalized == PricingModelType.CONCENTRATED.name:
            return PricingModelType.CONCENTRATED
        elif normalized == PricingModelType.CONSTANT_PRODUCT.name:
            return PricingModelType.CONSTANT_PRODUCT
        else:
            raise NotImplementedError(f"No pricing model enum for {model_str}")

    def __hash__(self):
        return hash(self.value)

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()


class FillStatus(Enum):
    FILLED = "FILLED"
    OUT_OF_RANGE = "OUT_OF_RANGE"

    @classmethod
    def from_str(cls, status_str):
        if status_str.upper() == FillStatus.FILLED.name:
            return FillStatus.FILLED
        elif status_str.upper() == FillStatus.OUT_OF_RANGE.name:
            return FillStatus.OUT_OF_RANGE
        else:
            raise NotImplementedError(f"No fill status enum for {status_str}")

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()
