"""
Debt inputs and the input normalizer.

``normalize`` turns raw debt records (mappings from a store or plan file,
or ``DebtInput`` instances built in code) into validated, canonical
``DebtInput`` objects. It collects every problem before raising, so a
caller can show the user all offending fields at once.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any

from .currency import ZERO, to_decimal
from .errors import ValidationError, ValidationIssue, warn_once
from .kinds import CompoundingFrequency, LoanType, all_values


@dataclass(frozen=True, slots=True)
class DebtInput:
    """
    One debt being simulated.

    Attributes:
        id: Identifier, unique within a run
        name: Display label (not used in the math)
        remaining_balance: Current principal owed (>= 0)
        minimum_payment: Contractual floor payment per period (>= 0)
        interest_rate: APR as a percentage, e.g. 24 for 24%
        additional_monthly_payment: Voluntary extra for this debt every period
        type: Free-form classification from the store (credit_card, auto, ...)
        loan_type: Revolving or installment credit
        compounding_frequency: Compounding convention for interest
        billing_cycle_days: Statement cycle length for daily-compounding revolving credit
    """

    id: str
    name: str
    remaining_balance: Decimal
    minimum_payment: Decimal
    interest_rate: Decimal
    additional_monthly_payment: Decimal = ZERO
    type: str = "other"
    loan_type: LoanType = LoanType.REVOLVING
    compounding_frequency: CompoundingFrequency = CompoundingFrequency.MONTHLY
    billing_cycle_days: int | None = None

    @property
    def is_paid_off(self) -> bool:
        return self.remaining_balance == ZERO

    @property
    def allocation(self) -> Decimal:
        """Guaranteed payment per period: minimum plus the debt's own extra."""
        return self.minimum_payment + self.additional_monthly_payment

    @property
    def uses_billing_cycle(self) -> bool:
        return (
            self.billing_cycle_days is not None
            and self.loan_type is LoanType.REVOLVING
            and self.compounding_frequency is CompoundingFrequency.DAILY
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly mapping with canonical keys."""
        return {
            "id": self.id,
            "name": self.name,
            "remaining_balance": str(self.remaining_balance),
            "minimum_payment": str(self.minimum_payment),
            "interest_rate": str(self.interest_rate),
            "additional_monthly_payment": str(self.additional_monthly_payment),
            "type": self.type,
            "loan_type": self.loan_type.value,
            "compounding_frequency": self.compounding_frequency.value,
            "billing_cycle_days": self.billing_cycle_days,
        }


# Storage-layer spellings -> canonical keys
ALIASES: dict[str, str] = {
    "remainingBalance": "remaining_balance",
    "minimumPayment": "minimum_payment",
    "additionalMonthlyPayment": "additional_monthly_payment",
    "interestRate": "interest_rate",
    "loanType": "loan_type",
    "compoundingFrequency": "compounding_frequency",
    "billingCycleDays": "billing_cycle_days",
}

_REQUIRED_AMOUNTS = ("remaining_balance", "minimum_payment", "interest_rate")

def _canonical_record(
    raw: Mapping[str, Any] | DebtInput, warned: set[tuple[str, str]]
) -> dict[str, Any]:
    if isinstance(raw, DebtInput):
        return {f.name: getattr(raw, f.name) for f in fields(raw)}

    record = dict(raw)
    label = str(record.get("id", "?"))
    for alias, canonical in ALIASES.items():
        if alias not in record:
            continue
        value = record.pop(alias)
        if canonical in record:
            if record[canonical] != value:
                warn_once(
                    warned,
                    "ALIAS_CLASH_" + canonical.upper(),
                    label,
                    f"[{label}] '{alias}' ignored because '{canonical}' is set "
                    f"(precedence: {canonical}).",
                    stacklevel=4,
                )
        else:
            record[canonical] = value
    return record


class _RecordChecker:
    """Collects issues for one record while coercing its fields."""

    def __init__(self, index: int, record: dict[str, Any], issues: list[ValidationIssue]):
        self.index = index
        self.record = record
        self.issues = issues
        self.debt_id: str | None = None

    def fail(self, field: str, reason: str) -> None:
        self.issues.append(
            ValidationIssue(field=field, reason=reason, index=self.index, debt_id=self.debt_id)
        )

    def identifier(self) -> str | None:
        value = self.record.get("id")
        if value is None or isinstance(value, bool) or str(value).strip() == "":
            self.fail("id", "is required")
            return None
        self.debt_id = str(value).strip()
        return self.debt_id

    def amount(self, field: str, *, required: bool) -> Decimal | None:
        if field not in self.record or self.record[field] is None:
            if required:
                self.fail(field, "is required")
                return None
            return ZERO
        try:
            value = to_decimal(self.record[field])
        except (TypeError, ValueError) as exc:
            self.fail(field, f"must be a number ({exc})")
            return None
        if value < ZERO:
            self.fail(field, f"must be >= 0, got {value}")
            return None
        return value

    def choice(self, field: str, enum_cls, default):
        value = self.record.get(field)
        if value is None:
            return default
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(str(value).strip().lower())
        except ValueError:
            self.fail(field, f"must be one of {all_values(enum_cls)}, got {value!r}")
            return None

    def cycle_days(self) -> int | None:
        value = self.record.get("billing_cycle_days")
        if value is None:
            return None
        if isinstance(value, bool):
            self.fail("billing_cycle_days", f"must be a positive integer, got {value!r}")
            return None
        try:
            number = to_decimal(value)
        except (TypeError, ValueError):
            self.fail("billing_cycle_days", f"must be a positive integer, got {value!r}")
            return None
        if number != number.to_integral_value() or number <= 0:
            self.fail("billing_cycle_days", f"must be a positive integer, got {value!r}")
            return None
        return int(number)


def normalize(raw_debts: Iterable[Mapping[str, Any] | DebtInput]) -> list[DebtInput]:
    """
    Validate and canonicalize raw debt records.

    Records may use canonical snake_case keys or the camelCase names of the
    storage layer (see ``ALIASES``). Zero-balance debts are kept; the
    simulator reports them as already paid off.

    Args:
        raw_debts: Mappings or ``DebtInput`` instances

    Returns:
        Validated debts in input order

    Raises:
        ValidationError: Listing every offending field across all records
    """
    issues: list[ValidationIssue] = []
    debts: list[DebtInput] = []
    seen: set[str] = set()
    warned: set[tuple[str, str]] = set()

    for index, raw in enumerate(raw_debts):
        if not isinstance(raw, (Mapping, DebtInput)):
            issues.append(
                ValidationIssue(
                    field="<record>",
                    reason=f"expected a mapping, got {type(raw).__name__}",
                    index=index,
                )
            )
            continue

        record = _canonical_record(raw, warned)
        check = _RecordChecker(index, record, issues)
        before = len(issues)

        debt_id = check.identifier()
        if debt_id is not None:
            if debt_id in seen:
                check.fail("id", "is duplicated")
            seen.add(debt_id)

        balance = check.amount("remaining_balance", required=True)
        minimum = check.amount("minimum_payment", required=True)
        rate = check.amount("interest_rate", required=True)
        additional = check.amount("additional_monthly_payment", required=False)
        loan_type = check.choice("loan_type", LoanType, LoanType.REVOLVING)
        compounding = check.choice(
            "compounding_frequency", CompoundingFrequency, CompoundingFrequency.MONTHLY
        )
        cycle_days = check.cycle_days()

        if balance is not None and minimum is not None:
            if balance > ZERO and minimum == ZERO:
                check.fail(
                    "minimum_payment",
                    "must be > 0 while remaining_balance > 0; "
                    "the debt would never amortize on its own",
                )

        if len(issues) > before:
            continue

        debt = DebtInput(
            id=debt_id,
            name=str(record.get("name") or debt_id),
            remaining_balance=balance,
            minimum_payment=minimum,
            interest_rate=rate,
            additional_monthly_payment=additional,
            type=str(record.get("type") or "other"),
            loan_type=loan_type,
            compounding_frequency=compounding,
            billing_cycle_days=cycle_days,
        )
        if cycle_days is not None and not debt.uses_billing_cycle:
            warn_once(
                warned,
                "BILLING_CYCLE_IGNORED",
                debt_id,
                f"[{debt_id}] billing_cycle_days only applies to daily-compounding "
                "revolving credit; ignored.",
            )
        debts.append(debt)

    if issues:
        raise ValidationError(issues)
    return debts


def total_minimums(debts: Iterable[DebtInput]) -> Decimal:
    """Sum of contractual minimum payments of the debts still owing money."""
    return sum((d.minimum_payment for d in debts if not d.is_paid_off), ZERO)
