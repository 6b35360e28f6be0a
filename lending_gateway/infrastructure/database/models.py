"""SQLAlchemy ORM models for the loans and referrals tables"""

import uuid
from sqlalchemy import Column, DateTime, Integer, Numeric, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class LoanRecord(Base):
    """Loan application; payment figures are derived on read, never stored"""

    __tablename__ = "loans"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    principal_amount = Column(Numeric(12, 2), nullable=False)
    interest_rate = Column(Numeric(5, 2), nullable=False)
    loan_term = Column(Integer, nullable=True)
    purpose = Column(Text, nullable=False)
    loan_status = Column(Text, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ReferralRecord(Base):
    """A user's referral code; both owner and code are unique"""

    __tablename__ = "referrals"
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_referrals_user_id"),
        UniqueConstraint("referral_code", name="uq_referrals_referral_code"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False)
    referral_code = Column(Text, nullable=False)
    referred_user_id = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="pending")
    reward_amount = Column(Numeric(12, 2), nullable=True)
    reward_type = Column(Text, nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
