"""Loan application validation, submission and read path"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Callable, List, Tuple

from lending_gateway.domain.amortization import calculate_amortization
from lending_gateway.domain.exceptions import (
    InvalidInputError,
    MissingFieldError,
    NotFoundError,
    OutOfRangeError,
)
from lending_gateway.domain.models import Loan, LoanStatus
from lending_gateway.domain.ownership import require_owner
from lending_gateway.domain.rate_tiers import rate_for_principal
from lending_gateway.domain.store import LOANS, Record, RecordStore
from lending_gateway.utils.money import quantize_currency, to_decimal

MIN_PRINCIPAL = Decimal("1000")
MAX_PRINCIPAL = Decimal("50000")
MIN_TERM_YEARS = 1
MAX_TERM_YEARS = 7
OFFERED_TERMS = (1, 3, 5, 7)
DEFAULT_TERM_YEARS = 3  # Applied to stored loans that predate the term column


def _parse_term(term_years) -> int:
    if isinstance(term_years, bool):
        raise InvalidInputError("Loan term must be a number of years", category="term")
    try:
        term = to_decimal(term_years)
    except InvalidOperation as e:
        raise InvalidInputError("Loan term must be a number of years", category="term") from e

    if term != term.to_integral_value():
        raise InvalidInputError("Loan term must be a whole number of years", category="term")
    # Range check stays on the Decimal; int() of "1e200000" would build a huge integer
    if term < MIN_TERM_YEARS or term > MAX_TERM_YEARS:
        raise OutOfRangeError("Loan term must be between 1 and 7 years", category="term")
    return int(term)


def validate_application(principal, term_years, purpose) -> Tuple[Decimal, int, str]:
    """
    Check a loan application and normalize its fields.

    Guards run in order and the first failure is raised:
    1. amount: numeric and within [$1,000, $50,000]
    2. term: whole years within [1, 7]
    3. purpose: not blank

    Returns:
        (principal rounded to cents, term in years, trimmed purpose)
    """
    try:
        amount = to_decimal(principal)
    except InvalidOperation as e:
        raise InvalidInputError("Loan amount must be a number", category="amount") from e
    if amount < MIN_PRINCIPAL or amount > MAX_PRINCIPAL:
        raise OutOfRangeError("Loan amount must be between $1,000 and $50,000", category="amount")

    term = _parse_term(term_years)

    cleaned_purpose = str(purpose).strip() if purpose is not None else ""
    if not cleaned_purpose:
        raise MissingFieldError("Please provide a detailed loan purpose", category="purpose")

    return quantize_currency(amount), term, cleaned_purpose


def enrich(record: Record) -> Loan:
    """Build a Loan from a stored record, recomputing the payment figures"""
    principal = to_decimal(record["principal_amount"])
    rate = to_decimal(record["interest_rate"])
    term = int(record.get("loan_term") or DEFAULT_TERM_YEARS)

    payment = calculate_amortization(principal, rate, term)

    return Loan(
        id=str(record["id"]),
        user_id=record["user_id"],
        principal_amount=principal,
        interest_rate=rate,
        loan_term=term,
        purpose=record["purpose"],
        loan_status=LoanStatus(record["loan_status"]),
        created_at=record["created_at"],
        monthly_payment=payment.monthly_payment,
        total_interest=payment.total_interest,
    )


class LoanLifecycle:
    """Submits loan applications and reads them back for their owner"""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] | None = None):
        self.store = store
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def submit(self, owner_id: str | None, principal, term_years, purpose) -> Loan:
        """
        Validate, price and persist a new application in PENDING state.

        The rate is fixed here from the tier policy and never revisited.

        Raises:
            UnauthenticatedError, InvalidInputError, OutOfRangeError,
            MissingFieldError, StoreUnavailableError
        """
        owner_id = require_owner(owner_id)
        amount, term, cleaned_purpose = validate_application(principal, term_years, purpose)

        stored = self.store.insert(
            LOANS,
            {
                "user_id": owner_id,
                "principal_amount": amount,
                "interest_rate": rate_for_principal(amount),
                "loan_term": term,
                "purpose": cleaned_purpose,
                "loan_status": LoanStatus.PENDING.value,
                "created_at": self.clock(),
            },
        )
        return enrich(stored)

    def list_for_owner(self, owner_id: str | None) -> List[Loan]:
        """Owner's loans, newest first"""
        owner_id = require_owner(owner_id)
        records = self.store.list_ordered(LOANS, {"user_id": owner_id}, "created_at", descending=True)
        return [enrich(record) for record in records]

    def get_for_owner(self, owner_id: str | None, loan_id: str) -> Loan:
        """Single loan; another user's loan is reported as missing"""
        owner_id = require_owner(owner_id)
        record = self.store.get_one(LOANS, {"id": loan_id, "user_id": owner_id})
        if record is None:
            raise NotFoundError(f"Loan {loan_id} not found")
        return enrich(record)
