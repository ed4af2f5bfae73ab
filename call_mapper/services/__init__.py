from call_mapper.services.assignment import AssignmentResult, assign_calls
from call_mapper.services.feasibility import FeasibilityResult, check_feasibility
from call_mapper.services.report import format_report

__all__ = [
    "AssignmentResult",
    "assign_calls",
    "FeasibilityResult",
    "check_feasibility",
    "format_report",
]
