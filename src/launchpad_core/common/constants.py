from decimal import Decimal

TOKEN_DECIMALS = 18
WEI_PER_ETH = 10 ** 18

# Launch defaults, both configurable per token
DEFAULT_TOTAL_SUPPLY = Decimal("1000000000")
DEFAULT_FDV_ETH = Decimal("20")

# Fixed in the factory contract
PRICE_RANGE_MULTIPLIER = Decimal("100")
CREATOR_FEE_BPS = 8000  # 80% of LP fees

# Pool fees are expressed in hundredths of a bip
PIPS_DENOMINATOR = 1_000_000
BPS_DENOMINATOR = 10_000
