"""Interest rate tiers by loan size"""

from decimal import Decimal

# (lower bound inclusive, annual rate percent), highest bound first
RATE_TIERS = (
    (Decimal("25000"), Decimal("5.5")),
    (Decimal("10000"), Decimal("6.5")),
    (Decimal("0"), Decimal("7.5")),
)


def rate_for_principal(principal: Decimal) -> Decimal:
    """
    Map a principal amount to its annual interest rate percent.

    Tiers:
    - below $10,000:           7.5%
    - $10,000 up to $25,000:   6.5%
    - $25,000 and above:       5.5%

    Larger loans get the lower rate. Negative input falls into the smallest tier.
    """
    for lower_bound, rate in RATE_TIERS:
        if principal >= lower_bound:
            return rate
    return RATE_TIERS[-1][1]


def tier_label(principal: Decimal) -> str:
    """Short label for metrics, e.g. '6.5%'"""
    return f"{rate_for_principal(principal)}%"
