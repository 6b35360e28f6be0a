"""Dependency injection for FastAPI endpoints"""

from typing import Optional
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session
from lending_gateway.domain.exceptions import (
    AllocationExhaustedError,
    DomainException,
    InvalidInputError,
    MissingFieldError,
    NotFoundError,
    OutOfRangeError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from lending_gateway.domain.lifecycle import LoanLifecycle
from lending_gateway.domain.referrals import ReferralAllocator
from lending_gateway.infrastructure.database.repositories import SqlRecordStore
from lending_gateway.infrastructure.database.session import get_db

HTTP_STATUS_BY_ERROR = {
    InvalidInputError: 422,
    OutOfRangeError: 422,
    MissingFieldError: 422,
    UnauthenticatedError: 401,
    NotFoundError: 404,
    AllocationExhaustedError: 503,
    StoreUnavailableError: 503,
}


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_owner_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Caller identity, already authenticated upstream; engines reject a missing one"""
    return x_user_id


def get_loan_lifecycle(db: Session = Depends(get_db)) -> LoanLifecycle:
    """Provide loan lifecycle bound to the request's session"""
    return LoanLifecycle(SqlRecordStore(db))


def get_referral_allocator(db: Session = Depends(get_db)) -> ReferralAllocator:
    """Provide referral allocator bound to the request's session"""
    return ReferralAllocator(SqlRecordStore(db))


def to_http_exception(error: DomainException) -> HTTPException:
    """Map a domain error to an HTTP error that keeps its category"""
    status_code = next(
        (code for error_type, code in HTTP_STATUS_BY_ERROR.items() if isinstance(error, error_type)),
        500,
    )
    return HTTPException(
        status_code=status_code,
        detail={"category": error.category, "message": error.message},
    )
