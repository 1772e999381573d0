from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchResult:
    """Outcome of one matching call (not persisted)."""

    employee_id: str
    similarity: float
    matched: bool = True
