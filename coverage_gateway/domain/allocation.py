"""Weighted integer allocation with largest-remainder rounding"""

import math
from typing import List, Sequence


def allocate_by_weights(total_amount: int, weights: Sequence[float]) -> List[int]:
    """
    Split an integer amount across weighted buckets.

    Requirements:
    - Allocations sum exactly to total_amount
    - Shares are proportional to weights (negative weights count as zero)
    - Flooring error goes to the largest fractional parts first (Hamilton's method)

    Example:
        10 over [1, 1, 1] -> raw 3.33 each, floors [3, 3, 3], remainder 1
        First bucket with the largest fraction gets +1 -> [4, 3, 3]
    """
    if not weights:
        return []

    if total_amount <= 0:
        return [0 for _ in weights]

    clamped = [max(0, weight) for weight in weights]
    weight_sum = sum(clamped)

    if weight_sum <= 0:
        equal, remainder = divmod(total_amount, len(weights))
        return [equal + (1 if index < remainder else 0) for index in range(len(weights))]

    raw_allocations = [(weight / weight_sum) * total_amount for weight in clamped]
    allocations = [math.floor(value) for value in raw_allocations]
    remainder = total_amount - sum(allocations)

    if remainder > 0:
        # Stable sort keeps index order among equal fractions
        by_fraction = sorted(
            range(len(raw_allocations)),
            key=lambda index: raw_allocations[index] - math.floor(raw_allocations[index]),
            reverse=True,
        )
        for i in range(remainder):
            allocations[by_fraction[i % len(by_fraction)]] += 1

    elif remainder < 0:
        by_amount = sorted(range(len(allocations)), key=lambda index: allocations[index], reverse=True)
        for i in range(-remainder):
            index = by_amount[i % len(by_amount)]
            allocations[index] = max(0, allocations[index] - 1)

    return allocations
