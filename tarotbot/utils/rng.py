"""RNG utilities for card draws: seeded generators and unbiased sampling."""

import hashlib
import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def seeded_random(seed: str, salt: str = "") -> random.Random:
    """Create a deterministic random.Random instance from seed and optional salt.

    Args:
        seed: Base seed string
        salt: Optional salt to modify the seed (e.g., a user id)

    Returns:
        random.Random instance that will produce deterministic sequences
    """
    combined = f"{seed}{salt}"
    hash_obj = hashlib.sha256(combined.encode('utf-8'))
    int_seed = int(hash_obj.hexdigest(), 16)

    # Mask to fit within Python's random seed range
    int_seed = int_seed & ((1 << 31) - 1)

    return random.Random(int_seed)


def sample_without_replacement(items: Sequence[T], count: int, rng: Optional[random.Random] = None) -> List[T]:
    """Draw `count` distinct items uniformly at random (partial Fisher-Yates).

    Only the first `count` positions of a working copy are shuffled, so the
    cost is O(len(items)) for the copy plus O(count) swaps.

    Raises:
        ValueError: if count is negative or larger than len(items)
    """
    if count < 0 or count > len(items):
        raise ValueError(f"Cannot draw {count} items from a pool of {len(items)}")

    rng = rng or random.SystemRandom()
    pool = list(items)
    n = len(pool)
    for i in range(count):
        j = rng.randrange(i, n)
        pool[i], pool[j] = pool[j], pool[i]
    return pool[:count]
