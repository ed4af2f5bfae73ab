import pytest
from loguru import logger

from call_mapper.core.logging import LOG_FORMAT
from call_mapper.services import assignment
from call_mapper.services.assignment import assign_calls, in_degrees, is_valid_assignment
from call_mapper.services.feasibility import balance_tolerance, max_calls_per_person

NAMES = ["Bill", "Bob", "Chris", "DaveG", "DaveH", "Ed", "Kevin", "Kyle", "Matt", "Pete", "Tim"]


def assert_no_reciprocal_calls(assignments):
    for person, targets in assignments.items():
        for target in targets:
            assert person not in assignments[target]


def assert_structure(assignments, participants, calls_per_person):
    assert sorted(assignments) == sorted(participants)
    for person, targets in assignments.items():
        assert len(targets) == calls_per_person
        assert person not in targets
        assert len(set(targets)) == len(targets)
    assert_no_reciprocal_calls(assignments)


def test_eleven_people_two_calls():
    result = assign_calls(NAMES, 2, seed=42)
    assert result.ok
    assert result.error is None
    assert result.calls_per_person == 2
    assert_structure(result.assignments, NAMES, 2)


def test_in_degree_spread_within_tolerance():
    result = assign_calls(NAMES, 3, seed=7)
    counts = in_degrees(result.assignments).values()
    assert max(counts) - min(counts) <= balance_tolerance(len(NAMES))


@pytest.mark.parametrize("n", [3, 4, 5, 7, 9, 12, 16, 20, 25, 33])
def test_max_calls_for_group_size(n):
    participants = [f"p{index}" for index in range(n)]
    calls = max_calls_per_person(n)
    result = assign_calls(participants, calls, seed=n)
    assert result.ok
    assert_structure(result.assignments, participants, calls)


def test_deterministic_seed():
    first = assign_calls(NAMES, 2, seed=123)
    second = assign_calls(NAMES, 2, seed=123)
    assert first == second


def test_unseeded_calls_vary():
    outcomes = {
        tuple(sorted((person, tuple(targets)) for person, targets in assign_calls(NAMES, 2).assignments.items()))
        for _ in range(5)
    }
    assert len(outcomes) > 1


def test_two_people_only_one_direction():
    result = assign_calls(["A", "B"], 2)
    assert result.ok
    assert result.assignments == {"A": ["B"], "B": []}
    assert result.calls_per_person == 1
    assert result.note


def test_one_person_is_an_error():
    result = assign_calls(["A"], 1)
    assert not result.ok
    assert "at least two participants" in result.error.lower()
    assert result.assignments == {}
    assert result.calls_per_person == 0


def test_no_participants_is_an_error():
    result = assign_calls([], 3)
    assert not result.ok
    assert result.assignments == {}


def test_requested_is_clamped_to_group_size():
    result = assign_calls(["A", "B", "C"], 1, seed=3)
    assert result.ok
    assert_structure(result.assignments, ["A", "B", "C"], 1)


def test_search_exhausted_for_impossible_request():
    participants = ["A", "B", "C", "D", "E"]
    result = assign_calls(participants, 3, seed=1)
    assert not result.ok
    assert "3 calls per person" in result.error
    assert "adding more participants" in result.error
    assert result.assignments == {}
    assert result.calls_per_person == 0


def test_circulant_fallback_when_random_search_fails(monkeypatch):
    monkeypatch.setattr(assignment, "_random_attempt", lambda rng, participants, calls: None)
    for n in range(3, 40):
        participants = [f"p{index}" for index in range(n)]
        calls = max_calls_per_person(n)
        result = assign_calls(participants, calls, seed=n)
        assert result.ok
        assert_structure(result.assignments, participants, calls)
        assert set(in_degrees(result.assignments).values()) == {calls}


def test_is_valid_assignment_rejects_reciprocal_pair():
    assignments = {"A": ["B"], "B": ["A"], "C": ["A"]}
    assert not is_valid_assignment(assignments, ["A", "B", "C"], 1)


def test_is_valid_assignment_rejects_self_call_and_duplicates():
    assert not is_valid_assignment({"A": ["A"], "B": ["C"], "C": ["A"]}, ["A", "B", "C"], 1)
    assert not is_valid_assignment({"A": ["B", "B"], "B": ["C", "D"], "C": ["D", "A"], "D": ["A", "B"]}, ["A", "B", "C", "D"], 2)


def test_is_valid_assignment_rejects_missing_participant():
    assert not is_valid_assignment({"A": ["B"], "B": ["C"]}, ["A", "B", "C"], 1)


def test_is_valid_assignment_accepts_cycle():
    assert is_valid_assignment({"A": ["B"], "B": ["C"], "C": ["A"]}, ["A", "B", "C"], 1)


def test_is_valid_assignment_rejects_unbalanced_in_degrees():
    participants = ["A", "B", "C", "D", "E", "F"]
    assignments = {"A": ["C"], "B": ["A"], "C": ["B"], "D": ["B"], "E": ["B"], "F": ["B"]}
    counts = in_degrees(assignments)
    assert counts["B"] == 4
    assert counts["D"] == 0
    assert not is_valid_assignment(assignments, participants, 1)


def test_seed_is_written_to_log_output():
    output = []
    sink_id = logger.add(output.append, level="DEBUG", format=LOG_FORMAT)
    try:
        assign_calls(NAMES, 2, seed=987654321)
    finally:
        logger.remove(sink_id)
    assert any("987654321" in line for line in output)
