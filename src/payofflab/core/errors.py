"""
Error classes for PayoffLab.

This module defines the exception and warning types raised by the payoff
engine. Only ``ValidationError`` is expected in normal operation: a plan
that never pays off is reported through ``ProjectionResult.converged``,
not through an exception.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationIssue:
    """
    A single offending field in the input.

    Attributes:
        field: Name of the offending field (canonical snake_case)
        reason: Human-readable description of the problem
        index: Position of the debt record in the input list (None for run-level fields)
        debt_id: Identifier of the debt record, when one could be read
    """

    field: str
    reason: str
    index: int | None = None
    debt_id: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "debt_id": self.debt_id,
            "field": self.field,
            "reason": self.reason,
        }

    def __str__(self) -> str:
        if self.index is None:
            return f"{self.field}: {self.reason}"
        label = f"debt[{self.index}]"
        if self.debt_id:
            label += f" ({self.debt_id})"
        return f"{label}.{self.field}: {self.reason}"


class ValidationError(ValueError):
    """
    Malformed or contradictory input, reported before any simulation work.

    Every offending field is collected, not only the first one found.

    Attributes:
        issues: All problems found in the input

    **Example Usage:**
        ```python
        from payofflab import normalize, ValidationError

        try:
            debts = normalize([{"id": "visa", "remaining_balance": -5}])
        except ValidationError as e:
            for issue in e.issues:
                print(issue.field, issue.reason)
        ```
    """

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = list(issues)
        super().__init__(self._fmt())

    def _fmt(self) -> str:
        count = len(self.issues)
        noun = "issue" if count == 1 else "issues"
        lines = [f"{count} validation {noun}:"]
        lines.extend(f"  - {issue}" for issue in self.issues)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {"issues": [issue.to_dict() for issue in self.issues]}


class ConfigError(Exception):
    """
    Misuse of the library itself rather than bad debt data.

    **Common Causes:**
    - Requesting an ordering strategy that is not registered
    - A safety horizon outside the supported range
    """


class SimulationCancelled(Exception):
    """Raised when the caller's cancellation token is set during a run."""

    def __init__(self, period: int):
        self.period = period
        super().__init__(f"Simulation cancelled at period {period}")


class PayoffWarning(UserWarning):
    """Warning for PayoffLab input that is accepted but partly ignored."""


def warn_once(
    seen: set[tuple[str, str]], code: str, debt_id: str, msg: str, stacklevel: int = 3
) -> None:
    """
    Emit a ``PayoffWarning`` once per (debt_id, code) within ``seen``.

    ``seen`` belongs to a single normalization call, so independent calls
    each report their own warnings.
    """
    key = (debt_id, code)
    if key not in seen:
        seen.add(key)
        warnings.warn(msg, PayoffWarning, stacklevel=stacklevel)
