"""Count allocation across multi-polygon parts, and seed derivation.

Both are pure and deterministic, so batch output does not depend on the
order in which work units execute.
"""

import hashlib
import json
from collections.abc import Sequence

import numpy as np

from dotdensity.engine.errors import InvalidArgumentError


def allocate_by_area(count: int, areas: Sequence[float]) -> list[int]:
    """Split ``count`` across parts in proportion to area (largest remainder).

    Each part first gets the floor of its quota. The units left over go one
    each to the parts with the largest fractional remainders; ties go to
    the larger part, then the earlier one. The result always sums to
    ``count`` and every entry is a non-negative integer. Parts with zero area
    receive nothing.

    Args:
        count: Total number of dots to distribute.
        areas: Area of each part (non-negative).

    Returns:
        One integer per part, in input order.

    Raises:
        InvalidArgumentError: Negative count or negative area, or a positive
            count with no part of positive area to receive it.
    """
    if count < 0:
        msg = f"count must be non-negative, got {count}."
        raise InvalidArgumentError(msg)

    weights = np.asarray(areas, dtype=np.float64)
    if np.any(weights < 0):
        msg = "areas must be non-negative."
        raise InvalidArgumentError(msg)

    n = len(weights)
    if count == 0:
        return [0] * n

    total = float(weights.sum())
    if total <= 0:
        msg = f"cannot allocate {count} dots across parts with zero total area."
        raise InvalidArgumentError(msg)

    quotas = count * weights / total
    shares = np.floor(quotas).astype(np.int64)
    fractions = quotas - shares
    leftover = count - int(shares.sum())

    order = sorted(range(n), key=lambda i: (-fractions[i], -weights[i], i))
    for i in order[:leftover]:
        shares[i] += 1

    return [int(s) for s in shares]


def derive_seed(base_seed: int | None, *keys: object) -> int | None:
    """Derive a stable 64-bit sub-seed from a base seed and identifying keys.

    Returns None when ``base_seed`` is None, leaving the sub-call unseeded.
    """
    if base_seed is None:
        return None
    serialized = json.dumps([base_seed, *keys], default=str)
    digest = hashlib.sha256(serialized.encode()).digest()
    return int.from_bytes(digest[:8], "big")
