from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from loguru import logger

from call_mapper.services.feasibility import (
    attempt_budget,
    balance_tolerance,
    check_feasibility,
)

Assignments = Dict[str, List[str]]


@dataclass(frozen=True)
class AssignmentResult:
    assignments: Assignments
    calls_per_person: int
    error: Optional[str] = None
    note: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str) -> "AssignmentResult":
        return cls(assignments={}, calls_per_person=0, error=error)


def _fresh_seed() -> int:
    return time.time_ns() + random.randrange(1_000_000)


def in_degrees(assignments: Mapping[str, Sequence[str]]) -> Dict[str, int]:
    counts = {person: 0 for person in assignments}
    for targets in assignments.values():
        for target in targets:
            counts[target] = counts.get(target, 0) + 1
    return counts


def is_valid_assignment(
    assignments: Mapping[str, Sequence[str]],
    participants: Sequence[str],
    calls_per_person: int,
) -> bool:
    """Check the structural invariants and the in-degree balance."""
    if set(assignments) != set(participants):
        return False

    for person, targets in assignments.items():
        if len(targets) != calls_per_person:
            return False
        if person in targets or len(set(targets)) != len(targets):
            return False
        if any(person in assignments.get(target, ()) for target in targets):
            return False

    counts = list(in_degrees(assignments).values())
    if not counts:
        return True
    return max(counts) - min(counts) <= balance_tolerance(len(participants))


def _random_attempt(rng: random.Random, participants: Sequence[str], calls_per_person: int) -> Optional[Assignments]:
    order = list(participants)
    rng.shuffle(order)
    assignments: Assignments = {person: [] for person in order}

    for person in order:
        needed = calls_per_person - len(assignments[person])
        if needed <= 0:
            continue
        candidates = [
            target
            for target in order
            if target != person
            and target not in assignments[person]
            and person not in assignments[target]
        ]
        if len(candidates) < needed:
            return None
        assignments[person].extend(rng.sample(candidates, needed))

    return assignments


def _circulant_attempt(rng: random.Random, participants: Sequence[str], calls_per_person: int) -> Assignments:
    order = list(participants)
    rng.shuffle(order)
    n = len(order)
    return {
        person: [order[(index + offset) % n] for offset in range(1, calls_per_person + 1)]
        for index, person in enumerate(order)
    }


def assign_calls(
    participants: Sequence[str],
    requested: int,
    seed: Optional[int] = None,
) -> AssignmentResult:
    n = len(participants)
    if n < 2:
        return AssignmentResult.failure("Need at least two participants to create call assignments.")
    if requested < 1:
        return AssignmentResult.failure("Calls per person must be at least 1.")

    if n == 2:
        first, second = participants
        return AssignmentResult(
            assignments={first: [second], second: []},
            calls_per_person=1,
            note="With only two participants, only one of them can call the other without a reciprocal call.",
        )

    calls_per_person = min(requested, n - 1)
    if seed is None:
        seed = _fresh_seed()
    rng = random.Random(seed)
    log = logger.bind(participants=n, calls_per_person=calls_per_person, seed=seed)
    log.debug("Generating call assignments with seed {seed}", seed=seed)

    budget = attempt_budget(n)
    for attempt in range(1, budget + 1):
        assignments = _random_attempt(rng, participants, calls_per_person)
        if assignments is None:
            continue
        if is_valid_assignment(assignments, participants, calls_per_person):
            log.bind(attempt=attempt).info("Call assignments generated")
            return AssignmentResult(assignments=assignments, calls_per_person=calls_per_person)

    if check_feasibility(n, calls_per_person).possible:
        assignments = _circulant_attempt(rng, participants, calls_per_person)
        if is_valid_assignment(assignments, participants, calls_per_person):
            log.bind(attempts=budget).warning("Random search exhausted, using circulant assignment")
            return AssignmentResult(assignments=assignments, calls_per_person=calls_per_person)

    log.bind(attempts=budget).warning("Failed to generate call assignments")
    return AssignmentResult.failure(
        f"Unable to create valid assignments with {requested} calls per person without "
        "reciprocal calls. Try reducing the number of calls per person or adding more participants."
    )
