"""Referral code allocation - one unique code per user"""

import logging
import random
from datetime import datetime, timezone
from typing import Callable

from lending_gateway.config import settings
from lending_gateway.domain.exceptions import AllocationExhaustedError, ConflictError, NotFoundError
from lending_gateway.domain.models import ReferralAllocation, ReferralStatus
from lending_gateway.domain.ownership import require_owner
from lending_gateway.domain.referral_codes import generate_referral_code
from lending_gateway.domain.store import REFERRALS, Record, RecordStore
from lending_gateway.utils.money import to_decimal

logger = logging.getLogger(__name__)


def to_allocation(record: Record) -> ReferralAllocation:
    """Map a stored referral record to the domain model"""
    reward_amount = record.get("reward_amount")
    return ReferralAllocation(
        id=str(record["id"]),
        user_id=record["user_id"],
        referral_code=record["referral_code"],
        status=ReferralStatus(record["status"]),
        created_at=record["created_at"],
        reward_amount=to_decimal(reward_amount) if reward_amount is not None else None,
        reward_type=record.get("reward_type"),
        expires_at=record.get("expires_at"),
        referred_user_id=record.get("referred_user_id"),
    )


class ReferralAllocator:
    """Looks up or allocates a user's referral code with bounded retry"""

    def __init__(
        self,
        store: RecordStore,
        rng: random.Random | None = None,
        max_attempts: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts if max_attempts is not None else settings.referral_max_attempts
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def get_allocation(self, owner_id: str | None) -> ReferralAllocation:
        """Existing allocation for the owner; NotFoundError if none yet"""
        owner_id = require_owner(owner_id)
        record = self.store.get_one(REFERRALS, {"user_id": owner_id})
        if record is None:
            raise NotFoundError("No referral code allocated yet")
        return to_allocation(record)

    def get_or_create_code(self, owner_id: str | None) -> ReferralAllocation:
        """
        Return the owner's referral code, allocating one on first request.

        Flow:
        1. Existing allocation for the owner → return it unchanged
        2. Generate a candidate; skip it if the code is already taken
        3. Insert with status PENDING
        4. Insert rejected by the store:
           - a concurrent request allocated for this owner → return that
           - otherwise the code collided → next candidate

        The code lookup in step 2 only saves a round trip; the store's unique
        constraints decide. Each candidate counts as one attempt.

        Raises:
            UnauthenticatedError: owner_id missing
            AllocationExhaustedError: every attempt collided
            StoreUnavailableError: store I/O failure, not retried
        """
        owner_id = require_owner(owner_id)

        existing = self.store.get_one(REFERRALS, {"user_id": owner_id})
        if existing is not None:
            return to_allocation(existing)

        for attempt in range(1, self.max_attempts + 1):
            candidate = generate_referral_code(owner_id, self.rng)

            if self.store.get_one(REFERRALS, {"referral_code": candidate}) is not None:
                logger.warning(
                    "Referral code collision on lookup",
                    extra={"user_id": owner_id, "attempt": attempt, "step": "referral_precheck"},
                )
                continue

            try:
                stored = self.store.insert(
                    REFERRALS,
                    {
                        "user_id": owner_id,
                        "referral_code": candidate,
                        "status": ReferralStatus.PENDING.value,
                        "created_at": self.clock(),
                    },
                )
            except ConflictError:
                winner = self.store.get_one(REFERRALS, {"user_id": owner_id})
                if winner is not None:
                    return to_allocation(winner)
                logger.warning(
                    "Referral code collision on insert",
                    extra={"user_id": owner_id, "attempt": attempt, "step": "referral_insert"},
                )
                continue

            return to_allocation(stored)

        raise AllocationExhaustedError(
            f"Could not allocate a unique referral code after {self.max_attempts} attempts"
        )
