from __future__ import annotations

from typing import Mapping, Sequence

TEXT_EXPORT_HEADER = "Call Assignments:\n\n"


def format_report(assignments: Mapping[str, Sequence[str]]) -> str:
    lines = []
    for person in sorted(assignments):
        targets = assignments[person]
        calls = " and ".join(targets) if targets else "no one"
        lines.append(f"{person} --> {calls}\n")
    return "".join(lines)


def format_text_export(assignments: Mapping[str, Sequence[str]]) -> str:
    return TEXT_EXPORT_HEADER + format_report(assignments)
