"""Loan application endpoints - submit, list and inspect a user's loans"""

import time
import uuid
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request

from lending_gateway.api.v1.schemas import LoanApplicationRequest, LoanListResponse, LoanResponse
from lending_gateway.api.dependencies import get_loan_lifecycle, get_owner_id, get_request_id, to_http_exception
from lending_gateway.domain.exceptions import (
    DomainException,
    InvalidInputError,
    MissingFieldError,
    OutOfRangeError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from lending_gateway.domain.lifecycle import LoanLifecycle
from lending_gateway.domain.models import Loan
from lending_gateway.domain.ownership import require_owner
from lending_gateway.infrastructure.observability.logging import log_loan_submission
from lending_gateway.infrastructure.observability.metrics import record_loan_application

router = APIRouter()


def to_loan_response(loan: Loan) -> LoanResponse:
    return LoanResponse(
        id=loan.id,
        user_id=loan.user_id,
        principal_amount=loan.principal_amount,
        interest_rate=loan.interest_rate,
        loan_term=loan.loan_term,
        purpose=loan.purpose,
        loan_status=loan.loan_status,
        is_terminal=loan.loan_status.is_terminal,
        created_at=loan.created_at,
        monthly_payment=loan.monthly_payment,
        total_interest=loan.total_interest,
    )


@router.post("/loans", response_model=LoanResponse, status_code=201)
def submit_loan(
    request_body: LoanApplicationRequest,
    request: Request,
    owner_id: Optional[str] = Depends(get_owner_id),
    lifecycle: LoanLifecycle = Depends(get_loan_lifecycle),
):
    """
    Submit a loan application.

    Flow:
    1. Validate amount, term and purpose (first failure wins)
    2. Assign the tier interest rate
    3. Persist in PENDING state
    4. Return the loan with monthly payment and total interest
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        loan = lifecycle.submit(
            owner_id,
            request_body.principal_amount,
            request_body.loan_term,
            request_body.purpose,
        )

    except (InvalidInputError, OutOfRangeError, MissingFieldError, UnauthenticatedError) as e:
        record_loan_application(e.category)
        logging.warning(f"Loan application rejected: {e}", extra={"request_id": request_id, "category": e.category})
        raise to_http_exception(e)

    except StoreUnavailableError as e:
        record_loan_application(e.category)
        logging.error(f"Store error: {e}", extra={"request_id": request_id})
        raise to_http_exception(e)

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_loan_application("accepted", loan.principal_amount)
    log_loan_submission(
        request_id,
        loan.user_id,
        "accepted",
        duration_ms,
        loan_id=loan.id,
        interest_rate=str(loan.interest_rate),
    )

    return to_loan_response(loan)


@router.get("/loans", response_model=LoanListResponse)
def list_loans(
    owner_id: Optional[str] = Depends(get_owner_id),
    lifecycle: LoanLifecycle = Depends(get_loan_lifecycle),
):
    """
    Retrieve the caller's loans, newest first.

    Payment figures are recomputed for every loan on each read.
    """
    try:
        loans = lifecycle.list_for_owner(owner_id)
    except DomainException as e:
        raise to_http_exception(e)

    return LoanListResponse(
        user_id=owner_id,
        loans=[to_loan_response(loan) for loan in loans],
    )


@router.get("/loans/{loan_id}", response_model=LoanResponse)
def get_loan(
    loan_id: str,
    owner_id: Optional[str] = Depends(get_owner_id),
    lifecycle: LoanLifecycle = Depends(get_loan_lifecycle),
):
    """Retrieve one of the caller's loans"""
    try:
        owner_id = require_owner(owner_id)
    except DomainException as e:
        raise to_http_exception(e)

    try:
        uuid.UUID(loan_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid loan ID format")

    try:
        loan = lifecycle.get_for_owner(owner_id, loan_id)
    except DomainException as e:
        raise to_http_exception(e)

    return to_loan_response(loan)
