"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from lending_gateway.domain.models import LoanStatus, ReferralStatus


class LoanApplicationRequest(BaseModel):
    """Request body for POST /v1/loans

    Bounds are enforced by the loan lifecycle so each failure reports its
    own category (amount, term, purpose) instead of a generic 422.
    """

    principal_amount: Decimal = Field(..., description="Requested amount in dollars, 1,000 to 50,000")
    loan_term: Decimal = Field(Decimal(3), description="Term in whole years, 1 to 7")
    purpose: Optional[str] = Field(None, description="What the loan is for")


class LoanResponse(BaseModel):
    """Loan application with payment figures computed at read time"""

    id: str
    user_id: str
    principal_amount: Decimal
    interest_rate: Decimal
    loan_term: int
    purpose: str
    loan_status: LoanStatus
    is_terminal: bool
    created_at: datetime
    monthly_payment: Decimal
    total_interest: Decimal


class LoanListResponse(BaseModel):
    """Response for GET /v1/loans"""

    user_id: str
    loans: List[LoanResponse]


class ReferralCodeResponse(BaseModel):
    """Response for /v1/referrals/code"""

    user_id: str
    referral_code: str
    status: ReferralStatus
    created_at: datetime
    reward_amount: Optional[Decimal] = None
    reward_type: Optional[str] = None
    expires_at: Optional[datetime] = None
