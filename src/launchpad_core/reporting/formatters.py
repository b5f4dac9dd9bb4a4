from decimal import Decimal, ROUND_HALF_UP

_SUFFIXES = (
    (Decimal("1000000000"), "B"),
    (Decimal("1000000"), "M"),
    (Decimal("1000"), "K"),
)

_TWO_PLACES = Decimal("0.01")


def _fixed(value: Decimal, places: int) -> str:
    quantum = Decimal(1).scaleb(-places)
    return str(value.quantize(quantum, rounding=ROUND_HALF_UP))


def format_token_amount(amount: Decimal) -> str:
    """1_234_567 -> '1.23M'. Two decimals, B/M/K suffix above a thousand."""
    for threshold, suffix in _SUFFIXES:
        if amount >= threshold:
            return _fixed(amount / threshold, 2) + suffix
    return _fixed(amount, 2)


def format_price(price: Decimal, places: int = 4) -> str:
    """Scientific notation below 1e-6, trimmed fixed point otherwise."""
    if price == 0:
        return "0"
    if abs(price) < Decimal("0.000001"):
        return f"{price:.{places}e}"
    text = _fixed(price, 10)
    return text.rstrip("0").rstrip(".")


def format_pct(value: Decimal, places: int = 2, signed: bool = False) -> str:
    text = _fixed(value, places)
    if signed and value >= 0:
        text = "+" + text
    return text + "%"


def format_fdv(fdv_eth: Decimal) -> str:
    return f"{format_price(fdv_eth)} ETH"


def share_of_supply(amount: Decimal, total_supply: Decimal) -> Decimal:
    """Percentage of supply, 0 when supply is unknown."""
    if total_supply == 0:
        return Decimal("0")
    return amount / total_supply * Decimal("100")
