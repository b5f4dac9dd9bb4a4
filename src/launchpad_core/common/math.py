from decimal import Decimal, ROUND_FLOOR, localcontext
from typing import Union

Q96 = 2 ** 96

# sqrtPriceX96 is a uint160, up to 49 digits
X96_PRECISION = 60

Numeric = Union[Decimal, int, float, str]


def to_decimal(value: Numeric) -> Decimal:
    """Converts ints, strings and floats to Decimal, floats via their repr to avoid binary noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def decimal_rel_close(a: Decimal, b: Decimal, rel_tol: Decimal = Decimal("1e-9")) -> bool:
    """
    Relative comparison: |a - b| <= rel_tol * max(|a|, |b|).
    Two zeros are close.
    """
    scale = max(abs(a), abs(b))
    if scale == 0:
        return True
    return abs(a - b) <= rel_tol * scale


def to_sqrt_price_x96(price: Decimal) -> int:
    """
    Encodes a token1-per-token0 price as the Q64.96 sqrt price used on-chain.
    Truncates toward zero like the integer math of the pool manager.
    """
    if price <= 0:
        raise ValueError("Price must be positive to encode as sqrtPriceX96.")
    with localcontext() as ctx:
        ctx.prec = X96_PRECISION
        return int((price.sqrt() * Q96).to_integral_value(rounding=ROUND_FLOOR))


def from_sqrt_price_x96(sqrt_price_x96: int) -> Decimal:
    """Decodes a Q64.96 sqrt price back into a plain price."""
    if sqrt_price_x96 <= 0:
        raise ValueError("sqrtPriceX96 must be positive.")
    with localcontext() as ctx:
        ctx.prec = X96_PRECISION
        sqrt_price = Decimal(sqrt_price_x96) / Decimal(Q96)
        return sqrt_price * sqrt_price
