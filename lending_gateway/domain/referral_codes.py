"""Referral code candidates"""

import random
import string

CODE_PREFIX = "REF"
OWNER_PREFIX_LENGTH = 4
SUFFIX_LENGTH = 6
SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_referral_code(owner_id: str, rng: random.Random) -> str:
    """
    Build a candidate code: REF-<first 4 chars of owner id>-<6 random A-Z0-9>.

    Example: owner "9f2c61d0-..." → "REF-9f2c-X7K2QM"

    The format is not unique on its own; 36^6 suffixes only make collisions
    rare. The store's unique constraint is what guarantees uniqueness.
    """
    suffix = "".join(rng.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{CODE_PREFIX}-{owner_id[:OWNER_PREFIX_LENGTH]}-{suffix}"
