from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

# (largest group size, calls per person) steps; larger groups get n // 3.
_MAX_CALLS_TABLE = (
    (4, 1),
    (8, 2),
    (12, 3),
    (18, 4),
    (20, 5),
)


@dataclass(frozen=True)
class FeasibilityResult:
    possible: bool
    reason: Optional[str] = None


def max_calls_per_person(n: int) -> int:
    """Conservative cap on calls one person may make in a group of ``n``.

    Tighter than the theoretical ``n // 2`` so the randomized search keeps
    enough slack to also satisfy the in-degree balance check. Every step keeps
    ``2 * cap < n`` for ``n >= 3``.
    """
    for group_size, cap in _MAX_CALLS_TABLE:
        if n <= group_size:
            return cap
    return n // 3


def max_non_reciprocal_calls(n: int) -> int:
    return n * (n - 1) // 2


def balance_tolerance(n: int) -> int:
    if n <= 10:
        return 2
    return math.ceil(n / 4)


def attempt_budget(n: int) -> int:
    if n <= 10:
        return 50
    if n <= 20:
        return 100
    return 200


def check_feasibility(n: int, requested: int) -> FeasibilityResult:
    if n < 2:
        return FeasibilityResult(False, "Need at least two participants to create call assignments.")
    if requested < 1:
        return FeasibilityResult(False, "Calls per person must be at least 1.")

    maximum = max_calls_per_person(n)
    if requested > maximum:
        return FeasibilityResult(
            False,
            f"Cannot assign {requested} calls per person without reciprocal calls. "
            f"With {n} participants, the maximum achievable is {maximum} calls per person. "
            "Try reducing the number of calls per person.",
        )

    total_required = n * requested
    max_edges = max_non_reciprocal_calls(n)
    if total_required > max_edges:
        return FeasibilityResult(
            False,
            f"Mathematically impossible: {n} participants with {requested} calls each "
            f"would require {total_required} total calls, but only {max_edges} "
            "non-reciprocal calls are possible. Try reducing the number of calls per person.",
        )

    return FeasibilityResult(True)
