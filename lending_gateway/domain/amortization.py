"""Fixed-payment amortization for consumer loans"""

from decimal import Decimal, InvalidOperation

from lending_gateway.domain.exceptions import InvalidInputError
from lending_gateway.domain.models import AmortizationResult
from lending_gateway.utils.money import quantize_currency, to_decimal

MONTHS_PER_YEAR = 12


def calculate_amortization(principal, annual_rate_percent, term_years: int) -> AmortizationResult:
    """
    Compute the fixed monthly payment and total interest for a loan.

    Formula (r = monthly rate, n = number of payments):
        payment = P * r * (1 + r)^n / ((1 + r)^n - 1)
        total_interest = payment * n - P

    A zero rate has no interest to amortize, so the payment is a straight
    P / n and total interest is exactly zero.

    Both figures are rounded to cents half away from zero. Total interest is
    taken from the unrounded payment so rounding happens once.

    Example:
        $10,000 at 6.5% over 3 years
        r = 0.065 / 12, n = 36
        payment = 306.49, total_interest = 1033.64

    Raises:
        InvalidInputError: principal <= 0, term_years <= 0, negative rate,
            or any argument that is not a finite number
    """
    try:
        principal = to_decimal(principal)
    except InvalidOperation as e:
        raise InvalidInputError("Principal must be a number", category="amount") from e
    try:
        annual_rate_percent = to_decimal(annual_rate_percent)
    except InvalidOperation as e:
        raise InvalidInputError("Interest rate must be a number", category="rate") from e

    if isinstance(term_years, bool) or not isinstance(term_years, int):
        raise InvalidInputError(f"Loan term must be a whole number of years, got {term_years!r}", category="term")
    if principal <= 0:
        raise InvalidInputError("Principal must be positive", category="amount")
    if term_years <= 0:
        raise InvalidInputError("Loan term must be positive", category="term")
    if annual_rate_percent < 0:
        raise InvalidInputError("Interest rate cannot be negative", category="rate")

    monthly_rate = annual_rate_percent / Decimal(100) / Decimal(MONTHS_PER_YEAR)
    num_payments = term_years * MONTHS_PER_YEAR

    if monthly_rate == 0:
        return AmortizationResult(
            monthly_payment=quantize_currency(principal / num_payments),
            total_interest=quantize_currency(Decimal(0)),
        )

    factor = (1 + monthly_rate) ** num_payments
    monthly_payment = principal * monthly_rate * factor / (factor - 1)
    total_interest = monthly_payment * num_payments - principal

    return AmortizationResult(
        monthly_payment=quantize_currency(monthly_payment),
        total_interest=quantize_currency(total_interest),
    )
