from __future__ import annotations

from collections import Counter
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from call_mapper.services.assignment import AssignmentResult, assign_calls
from call_mapper.services.feasibility import check_feasibility, max_calls_per_person


def parse_names(text: str) -> List[str]:
    return [name.strip() for name in text.split(",") if name.strip()]


def find_duplicates(names: Sequence[str]) -> List[str]:
    counts = Counter(names)
    duplicates: List[str] = []
    for name in names:
        if counts[name] > 1 and name not in duplicates:
            duplicates.append(name)
    return duplicates


def resolve_calls_per_person(n: int, requested: Optional[int], default: int) -> int:
    """Pick the per-person count to use for a group of ``n``.

    An explicit request is passed through untouched so the feasibility check
    can report on it. Without one, ``default`` is lowered to what the group
    size allows.
    """
    if requested is not None:
        return requested
    if n < 2:
        return default
    return min(default, max_calls_per_person(n))


def plan_calls(names: Sequence[str], requested: int, seed: Optional[int] = None) -> AssignmentResult:
    if len(names) <= 2:
        return assign_calls(names, requested, seed=seed)

    feasibility = check_feasibility(len(names), requested)
    if not feasibility.possible:
        logger.bind(participants=len(names), requested=requested).info(
            "Rejected infeasible configuration"
        )
        return AssignmentResult.failure(feasibility.reason)

    return assign_calls(names, requested, seed=seed)


def parse_calls_request(text: str) -> Tuple[Optional[int], List[str]]:
    """Split ``"[count] name, name, ..."`` into the optional count and the names."""
    parts = text.strip().split(maxsplit=1)
    if parts and parts[0].isascii() and parts[0].isdigit():
        rest = parts[1] if len(parts) > 1 else ""
        return int(parts[0]), parse_names(rest)
    return None, parse_names(text)
