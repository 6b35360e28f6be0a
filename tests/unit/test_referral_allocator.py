"""Unit tests for referral code allocation"""

import random
import re
import pytest
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from unittest.mock import MagicMock
from lending_gateway.config import settings
from lending_gateway.domain.exceptions import (
    AllocationExhaustedError,
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from lending_gateway.domain.models import ReferralStatus
from lending_gateway.domain.referral_codes import generate_referral_code
from lending_gateway.domain.referrals import ReferralAllocator

CREATED_AT = datetime(2026, 3, 1, tzinfo=timezone.utc)


def referral_record(user_id: str, code: str) -> dict:
    return {
        "id": "ref-1",
        "user_id": user_id,
        "referral_code": code,
        "status": "pending",
        "created_at": CREATED_AT,
    }


def test_first_request_allocates_pending_code(memory_store, rng):
    allocator = ReferralAllocator(memory_store, rng=rng)

    allocation = allocator.get_or_create_code("9f2c61d0-user")

    assert re.match(r"^REF-9f2c-[A-Z0-9]{6}$", allocation.referral_code)
    assert allocation.user_id == "9f2c61d0-user"
    assert allocation.status is ReferralStatus.PENDING
    assert memory_store.insert_calls == 1


def test_repeated_requests_return_same_code(memory_store, rng):
    allocator = ReferralAllocator(memory_store, rng=rng)

    first = allocator.get_or_create_code("user_1")
    second = allocator.get_or_create_code("user_1")

    assert first.referral_code == second.referral_code
    assert memory_store.insert_calls == 1


def test_existing_allocation_is_never_overwritten(memory_store, rng):
    memory_store.insert("referrals", referral_record("user_1", "REF-user-KEEPME"))
    memory_store.upsert("referrals", "user_id", {"user_id": "user_1", "status": "completed"})

    allocation = ReferralAllocator(memory_store, rng=rng).get_or_create_code("user_1")

    assert allocation.referral_code == "REF-user-KEEPME"
    assert allocation.status is ReferralStatus.COMPLETED


def test_distinct_owners_get_distinct_codes(memory_store):
    allocator = ReferralAllocator(memory_store, rng=random.Random(5))

    codes = [allocator.get_or_create_code(f"user_{i:03d}").referral_code for i in range(100)]

    assert len(set(codes)) == len(codes)


def test_taken_code_is_skipped_before_insert(memory_store):
    """Lookup by code finds the first candidate taken; the second is used"""
    taken = generate_referral_code("user_1", random.Random(42))
    memory_store.insert("referrals", referral_record("someone_else", taken))
    memory_store.insert_calls = 0

    allocation = ReferralAllocator(memory_store, rng=random.Random(42)).get_or_create_code("user_1")

    assert allocation.referral_code != taken
    assert memory_store.insert_calls == 1


def test_exhausted_when_every_insert_conflicts():
    store = MagicMock()
    store.get_one.return_value = None
    store.insert.side_effect = ConflictError("Duplicate record in referrals")

    allocator = ReferralAllocator(store, rng=random.Random(1), max_attempts=5)

    with pytest.raises(AllocationExhaustedError) as exc_info:
        allocator.get_or_create_code("user_1")

    assert store.insert.call_count == 5
    assert exc_info.value.category == "allocation"


def test_exhausted_when_every_candidate_is_taken():
    store = MagicMock()
    store.get_one.side_effect = lambda collection, filters: (
        referral_record("someone_else", filters["referral_code"]) if "referral_code" in filters else None
    )

    allocator = ReferralAllocator(store, rng=random.Random(1), max_attempts=3)

    with pytest.raises(AllocationExhaustedError):
        allocator.get_or_create_code("user_1")

    store.insert.assert_not_called()
    code_lookups = [c for c in store.get_one.call_args_list if "referral_code" in c.args[1]]
    assert len(code_lookups) == 3


def test_conflict_then_success():
    store = MagicMock()
    store.get_one.return_value = None
    store.insert.side_effect = [
        ConflictError("Duplicate record in referrals"),
        referral_record("user_1", "REF-user-SECOND"),
    ]

    allocation = ReferralAllocator(store, rng=random.Random(1)).get_or_create_code("user_1")

    assert allocation.referral_code == "REF-user-SECOND"
    assert store.insert.call_count == 2


def test_lost_race_for_same_owner_returns_winner():
    """A concurrent request inserted first; its code is returned instead of retrying"""
    winner = referral_record("user_1", "REF-user-WINNER")
    store = MagicMock()
    store.get_one.side_effect = [None, None, winner]
    store.insert.side_effect = ConflictError("Duplicate record in referrals")

    allocation = ReferralAllocator(store, rng=random.Random(1)).get_or_create_code("user_1")

    assert allocation.referral_code == "REF-user-WINNER"
    assert store.insert.call_count == 1


def test_store_failure_is_not_retried():
    store = MagicMock()
    store.get_one.return_value = None
    store.insert.side_effect = StoreUnavailableError("Write to referrals failed")

    with pytest.raises(StoreUnavailableError):
        ReferralAllocator(store, rng=random.Random(1)).get_or_create_code("user_1")

    assert store.insert.call_count == 1


@pytest.mark.parametrize("owner_id", [None, "", "  "])
def test_requires_owner(memory_store, owner_id):
    with pytest.raises(UnauthenticatedError):
        ReferralAllocator(memory_store).get_or_create_code(owner_id)

    assert memory_store.insert_calls == 0


def test_max_attempts_defaults_to_settings(memory_store):
    assert ReferralAllocator(memory_store).max_attempts == settings.referral_max_attempts


def test_concurrent_requests_for_one_owner_agree(memory_store):
    allocator = ReferralAllocator(memory_store, rng=random.Random(3))

    with ThreadPoolExecutor(max_workers=8) as pool:
        codes = list(pool.map(lambda _: allocator.get_or_create_code("user_1").referral_code, range(16)))

    assert len(set(codes)) == 1
    assert len(memory_store.collections["referrals"]) == 1


def test_get_allocation(memory_store, rng):
    allocator = ReferralAllocator(memory_store, rng=rng)

    with pytest.raises(NotFoundError):
        allocator.get_allocation("user_1")

    created = allocator.get_or_create_code("user_1")
    assert allocator.get_allocation("user_1").referral_code == created.referral_code
