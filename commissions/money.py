"""
Money helpers shared by the resolver and the reducers.

All use Decimal for precision with ROUND_HALF_UP rounding.
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

# Fixed net -> gross conversion (23% VAT on brokerage commission)
GROSS_RATIO = Decimal("1.23")

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places using half-up rounding."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def floor_money(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_DOWN)


def quantize_percent(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def safe_ratio(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole, or 0 when whole is 0."""
    if whole == 0:
        return ZERO
    return part / whole


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    return quantize_percent(safe_ratio(part, whole) * HUNDRED)


def gross_from_net(net: Decimal) -> Decimal:
    return quantize_money(net * GROSS_RATIO)
