"""Unit tests for interest rate tiers"""

import pytest
from decimal import Decimal
from lending_gateway.domain.rate_tiers import rate_for_principal, tier_label


@pytest.mark.parametrize(
    "principal, expected_rate",
    [
        ("0", "7.5"),
        ("1000", "7.5"),
        ("9999.99", "7.5"),
        ("10000", "6.5"),  # Lower bound inclusive
        ("24999.99", "6.5"),
        ("25000", "5.5"),  # Lower bound inclusive
        ("50000", "5.5"),
        ("1000000", "5.5"),
    ],
)
def test_rate_tier_boundaries(principal, expected_rate):
    assert rate_for_principal(Decimal(principal)) == Decimal(expected_rate)


def test_larger_loans_never_cost_more():
    amounts = [Decimal(n) for n in range(0, 60001, 2500)]
    rates = [rate_for_principal(a) for a in amounts]

    assert rates == sorted(rates, reverse=True)


def test_tier_label():
    assert tier_label(Decimal("10000")) == "6.5%"
    assert tier_label(Decimal("500")) == "7.5%"
