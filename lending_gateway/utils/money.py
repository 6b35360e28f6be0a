"""Currency helpers shared by the loan engines"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """
    Convert user or store input to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary
    expansion. Raises InvalidOperation for anything that is not a finite number.
    """
    if isinstance(value, bool):
        raise InvalidOperation(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        result = Decimal(value.strip())
    else:
        raise InvalidOperation(f"Not a number: {value!r}")

    if not result.is_finite():
        raise InvalidOperation(f"Not a finite number: {value!r}")
    return result


def quantize_currency(amount: Decimal) -> Decimal:
    """Round to cents, half away from zero"""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
