"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class LoanStatus(str, Enum):
    """States a loan application may occupy.

    Only PENDING is ever written by this service; the rest are set by the
    external decision process and must still render.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"
    PAID = "paid"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_LOAN_STATUSES


TERMINAL_LOAN_STATUSES = frozenset({LoanStatus.REJECTED, LoanStatus.PAID})


class ReferralStatus(str, Enum):
    """Progress of a referral, advanced by external referral tracking"""

    PENDING = "pending"
    COMPLETED = "completed"
    EXPIRED = "expired"


@dataclass
class AmortizationResult:
    """Fixed monthly payment and the interest it accrues over the term"""

    monthly_payment: Decimal
    total_interest: Decimal


@dataclass
class Loan:
    """Loan application as stored, plus payment figures derived on read"""

    id: str
    user_id: str
    principal_amount: Decimal
    interest_rate: Decimal  # Annual percent, e.g. Decimal("6.5")
    loan_term: int  # Years
    purpose: str
    loan_status: LoanStatus
    created_at: datetime
    monthly_payment: Decimal
    total_interest: Decimal


@dataclass
class ReferralAllocation:
    """The single referral code owned by a user"""

    id: str
    user_id: str
    referral_code: str
    status: ReferralStatus
    created_at: datetime
    reward_amount: Optional[Decimal] = None
    reward_type: Optional[str] = None
    expires_at: Optional[datetime] = None
    referred_user_id: Optional[str] = None
