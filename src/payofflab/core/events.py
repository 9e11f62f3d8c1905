"""
Event classes for tracking simulation occurrences.
"""

from __future__ import annotations

from typing import Any, NamedTuple


class Event(NamedTuple):
    """
    Period-stamped event record for a payoff simulation.

    Attributes:
        period: The 1-based tick on which the event occurred
        kind: Event type identifier ('payoff', 'rolldown_start', 'capped')
        debt_id: Debt the event concerns (None for run-level events)
        message: Human-readable description of the event
        meta: Optional dictionary with additional event metadata
    """

    period: int
    kind: str
    debt_id: str | None
    message: str
    meta: dict[str, Any] | None = None
