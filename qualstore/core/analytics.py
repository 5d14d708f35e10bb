"""Derived Analytics — pure computations over the assignment table and audit log.

Invariants:
    - Every function is pure: output depends only on its arguments, inputs never mutated
    - assignments_by_row keys are str(row_id); codes per row are unique, in code
      iteration order (not assignment time)
    - cooccurrence is symmetric: m[a][b] == m[b][a] for all a != b; no diagonal
    - saturation counts "create" events among the last `window` log entries only

Design Decisions:
    - Plain functions, not methods on the store: the store wires them into its
      reactive graph, tests call them directly
    - Flat dicts of ints for analytics output (JSON-serializable as-is)
"""

import dataclasses
from typing import Mapping, Sequence

from qualstore.core.domain_types import (
    CodeId, CodingAction, RowId,
    SATURATION_THRESHOLD, SATURATION_WINDOW, TREND_EXPLORING, TREND_SATURATED,
)
from qualstore.core.entities import Code, CodingEvent

Assignments = Mapping[CodeId, Sequence[RowId]]


def assignments_by_row(assignments: Assignments) -> dict[str, list[CodeId]]:
    """Invert the assignment table: row key -> codes that have the row."""
    result: dict[str, list[CodeId]] = {}
    for code_id, rows in assignments.items():
        for row_id in rows:
            codes = result.setdefault(str(row_id), [])
            if code_id not in codes:
                codes.append(code_id)
    return result


def codes_with_frequency(
    codes: Sequence[Code], assignments: Assignments,
) -> list[Code]:
    """Copies of `codes` with frequency set to the live assignment count."""
    return [
        dataclasses.replace(code, frequency=len(assignments.get(code.id, ())))
        for code in codes
    ]


def cooccurrence(
    by_row: Mapping[str, Sequence[CodeId]],
) -> dict[CodeId, dict[CodeId, int]]:
    """Count, for each unordered pair of distinct codes, the rows they share."""
    matrix: dict[CodeId, dict[CodeId, int]] = {}
    for codes in by_row.values():
        for i, a in enumerate(codes):
            for b in codes[i + 1:]:
                if a == b:
                    continue
                row_a = matrix.setdefault(a, {})
                row_b = matrix.setdefault(b, {})
                row_a[b] = row_a.get(b, 0) + 1
                row_b[a] = row_b.get(a, 0) + 1
    return matrix


def saturation(
    codes: Sequence[Code],
    events: Sequence[CodingEvent],
    window: int = SATURATION_WINDOW,
    threshold: int = SATURATION_THRESHOLD,
) -> dict:
    """Heuristic saturation signal from the tail of the audit log."""
    recent = events[-window:] if window > 0 else []
    recent_new_codes = sum(1 for e in recent if e.action == CodingAction.CREATE)
    return {
        "total_codes": len(codes),
        "recent_new_codes": recent_new_codes,
        "trend": TREND_SATURATED if recent_new_codes <= threshold else TREND_EXPLORING,
    }