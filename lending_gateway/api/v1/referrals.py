"""Referral code endpoints"""

import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request

from lending_gateway.api.v1.schemas import ReferralCodeResponse
from lending_gateway.api.dependencies import get_owner_id, get_referral_allocator, get_request_id, to_http_exception
from lending_gateway.domain.exceptions import (
    AllocationExhaustedError,
    DomainException,
    StoreUnavailableError,
    UnauthenticatedError,
)
from lending_gateway.domain.models import ReferralAllocation
from lending_gateway.domain.referrals import ReferralAllocator
from lending_gateway.infrastructure.observability.logging import log_referral_allocation
from lending_gateway.infrastructure.observability.metrics import record_referral_request

router = APIRouter()

OUTCOME_BY_ERROR = {
    AllocationExhaustedError: "exhausted",
    StoreUnavailableError: "unavailable",
    UnauthenticatedError: "auth",
}


def to_referral_response(allocation: ReferralAllocation) -> ReferralCodeResponse:
    return ReferralCodeResponse(
        user_id=allocation.user_id,
        referral_code=allocation.referral_code,
        status=allocation.status,
        created_at=allocation.created_at,
        reward_amount=allocation.reward_amount,
        reward_type=allocation.reward_type,
        expires_at=allocation.expires_at,
    )


@router.post("/referrals/code", response_model=ReferralCodeResponse)
def get_or_create_referral_code(
    request: Request,
    owner_id: Optional[str] = Depends(get_owner_id),
    allocator: ReferralAllocator = Depends(get_referral_allocator),
):
    """
    Return the caller's referral code, allocating one on first request.

    Repeated calls return the same code.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        allocation = allocator.get_or_create_code(owner_id)

    except (AllocationExhaustedError, StoreUnavailableError, UnauthenticatedError) as e:
        outcome = OUTCOME_BY_ERROR[type(e)]
        record_referral_request(outcome)
        logging.error(f"Referral code request failed: {e}", extra={"request_id": request_id, "outcome": outcome})
        raise to_http_exception(e)

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_referral_request("issued")
    log_referral_allocation(request_id, allocation.user_id, "issued", duration_ms, allocation.referral_code)

    return to_referral_response(allocation)


@router.get("/referrals/code", response_model=ReferralCodeResponse)
def get_referral_code(
    owner_id: Optional[str] = Depends(get_owner_id),
    allocator: ReferralAllocator = Depends(get_referral_allocator),
):
    """Look up the caller's referral code without allocating one"""
    try:
        allocation = allocator.get_allocation(owner_id)
    except DomainException as e:
        raise to_http_exception(e)

    return to_referral_response(allocation)
