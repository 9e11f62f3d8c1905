"""
PayoffLab kind constants.

String-valued enums so that plan files, CLI flags and stored settings can
be parsed with ``Enum(value)``.
"""

from __future__ import annotations

from enum import Enum


class PayoffMethod(Enum):
    """
    Payoff priority strategy for a run.

    Attributes:
        AVALANCHE: Highest interest rate first
        SNOWBALL: Smallest balance first
    """

    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"


class PaymentFrequency(Enum):
    """How often payments are made; one simulation tick per payment."""

    MONTHLY = "monthly"
    BIWEEKLY = "biweekly"
    WEEKLY = "weekly"

    @property
    def periods_per_year(self) -> int:
        return _TICKS_PER_YEAR[self]


class CompoundingFrequency(Enum):
    """Interest compounding convention of a single debt."""

    DAILY = "daily"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"

    @property
    def periods_per_year(self) -> int:
        return _COMPOUNDING_PER_YEAR[self]


class LoanType(Enum):
    """Credit classification; only revolving credit honours billing cycles."""

    REVOLVING = "revolving"
    INSTALLMENT = "installment"


_TICKS_PER_YEAR = {
    PaymentFrequency.MONTHLY: 12,
    PaymentFrequency.BIWEEKLY: 26,
    PaymentFrequency.WEEKLY: 52,
}

_COMPOUNDING_PER_YEAR = {
    CompoundingFrequency.DAILY: 365,
    CompoundingFrequency.MONTHLY: 12,
    CompoundingFrequency.QUARTERLY: 4,
    CompoundingFrequency.ANNUALLY: 1,
}


def all_values(enum_cls: type[Enum]) -> list[str]:
    """Enumerate the accepted string values of an enum (for validation and docs)."""
    return [member.value for member in enum_cls]
