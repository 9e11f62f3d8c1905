"""Utilities for loading debt plans from YAML/JSON sources."""

from __future__ import annotations

import json
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from .context import LumpSumPayment, StrategySettings
from .currency import to_decimal
from .debts import DebtInput, normalize
from .engine import parse_lump_sums
from .errors import ValidationError
from .kinds import PaymentFrequency, PayoffMethod, all_values
from .whatif import Scenario

__all__ = [
    "PlanError",
    "DebtPlan",
    "load_plan",
    "dump_plan",
]


class PlanError(ValueError):
    """Raised when a plan file cannot be parsed or its structure is invalid."""


@dataclass(slots=True)
class DebtPlan:
    """
    Structured representation of a debt plan file.

    Attributes:
        debts: Normalized debts
        settings: Strategy settings for the default run
        start_date: Simulation start date (None means the caller decides)
        currency: Reporting currency code
        lump_sums: One-off payments for the default run
        scenarios: What-if scenarios (may be empty)
        source: Path or ``<mapping>``
    """

    debts: list[DebtInput]
    settings: StrategySettings
    start_date: date | None = None
    currency: str = "USD"
    lump_sums: tuple[LumpSumPayment, ...] = ()
    scenarios: list[Scenario] = field(default_factory=list)
    source: str = "<memory>"


def load_plan(source: str | Path | dict[str, Any], *, format: str | None = None) -> DebtPlan:
    """
    Parse a debt plan from YAML/JSON/dict.

    Expected layout::

        settings:
          method: avalanche
          frequency: monthly
          extra_monthly_payment: 100
          start_date: 2026-01-01
          currency: USD
          lump_sums: [{period: 6, amount: 1000}]
        debts:
          - {id: visa, remaining_balance: 1000, minimum_payment: 50, interest_rate: 24}
        scenarios:
          - {id: base, extra_monthly_payment: 0}

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist
        PlanError: If the structure is invalid
        ValidationError: If a debt record is invalid
    """
    mapping, label = _read_source(source, format=format)
    settings_raw = _ensure_dict(mapping.get("settings"), f"{label}::settings")
    debts_raw = _ensure_list(mapping.get("debts"), f"{label}::debts")
    for idx, entry in enumerate(debts_raw):
        _ensure_dict(entry, f"{label}::debts[{idx}]")

    settings = _normalize_settings(settings_raw, label)
    lump_sums = _normalize_lump_sums(settings_raw.get("lump_sums"), label)
    scenarios = _normalize_scenarios(mapping.get("scenarios"), label)

    return DebtPlan(
        debts=normalize(debts_raw),
        settings=settings,
        start_date=_coerce_date(settings_raw.get("start_date"), f"{label}::settings.start_date"),
        currency=_coerce_str(settings_raw.get("currency", "USD"), f"{label}::settings.currency"),
        lump_sums=lump_sums,
        scenarios=scenarios,
        source=label,
    )


def dump_plan(plan: DebtPlan) -> dict[str, Any]:
    """Inverse of ``load_plan`` for a plan's settings and debts (JSON-friendly)."""
    settings: dict[str, Any] = {
        "method": plan.settings.method.value,
        "frequency": plan.settings.frequency.value,
        "extra_monthly_payment": str(plan.settings.extra_monthly_payment),
        "currency": plan.currency,
    }
    if plan.start_date is not None:
        settings["start_date"] = plan.start_date.isoformat()
    if plan.lump_sums:
        settings["lump_sums"] = [p.to_dict() for p in plan.lump_sums]
    return {"settings": settings, "debts": [d.to_dict() for d in plan.debts]}


def _read_source(
    source: str | Path | dict[str, Any], *, format: str | None
) -> tuple[dict[str, Any], str]:
    if isinstance(source, dict):
        return deepcopy(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    try:
        if fmt in {"yaml", "yml", ""}:
            data = yaml.safe_load(text)
        elif fmt == "json":
            data = json.loads(text)
        else:
            raise PlanError(f"Unsupported plan format '{fmt}' for {path}")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise PlanError(f"Could not parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise PlanError(f"Plan root must be a mapping (source={path})")
    return data, str(path)


def _normalize_settings(raw: dict[str, Any], label: str) -> StrategySettings:
    ctx = f"{label}::settings"
    method = _coerce_choice(raw.get("method", "avalanche"), PayoffMethod, f"{ctx}.method")
    frequency = _coerce_choice(
        raw.get("frequency", "monthly"), PaymentFrequency, f"{ctx}.frequency"
    )
    extra_raw = raw.get("extra_monthly_payment", raw.get("extraMonthlyPayment", 0))
    try:
        extra = to_decimal(extra_raw)
    except (TypeError, ValueError) as exc:
        raise PlanError(f"{ctx}.extra_monthly_payment: {exc}") from exc
    if extra < 0:
        raise PlanError(f"{ctx}.extra_monthly_payment must be >= 0")
    return StrategySettings(method=method, frequency=frequency, extra_monthly_payment=extra)


def _normalize_lump_sums(raw: Any, label: str) -> tuple[LumpSumPayment, ...]:
    entries = _ensure_list(raw, f"{label}::settings.lump_sums", allow_none=True)
    if entries is None:
        return ()
    try:
        return parse_lump_sums(entries)
    except ValidationError as exc:
        raise PlanError(f"{label}::settings: {exc}") from exc


def _normalize_scenarios(raw: Any, label: str) -> list[Scenario]:
    entries = _ensure_list(raw, f"{label}::scenarios", allow_none=True)
    if entries is None:
        return []

    scenarios: list[Scenario] = []
    for idx, entry in enumerate(entries):
        ctx = f"{label}::scenarios[{idx}]"
        data = _ensure_dict(entry, ctx)
        scenario_id = data.get("id")
        if not isinstance(scenario_id, str) or not scenario_id.strip():
            raise PlanError(f"{ctx}: 'id' is required")
        if "method" in data:
            data["method"] = _coerce_choice(data["method"], PayoffMethod, f"{ctx}.method")
        if "frequency" in data:
            data["frequency"] = _coerce_choice(
                data["frequency"], PaymentFrequency, f"{ctx}.frequency"
            )
        lump_sums = _ensure_list(data.get("lump_sums"), f"{ctx}.lump_sums", allow_none=True)
        if lump_sums is not None:
            try:
                data["lump_sums"] = parse_lump_sums(lump_sums)
            except ValidationError as exc:
                raise PlanError(f"{ctx}: {exc}") from exc
        scenarios.append(Scenario.from_dict(data))
    return scenarios


def _coerce_choice(value: Any, enum_cls, ctx: str):
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as exc:
        raise PlanError(f"{ctx}: expected one of {all_values(enum_cls)}, got {value!r}") from exc


def _coerce_date(value: Any, ctx: str) -> date | None:
    if value is None:
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise PlanError(f"{ctx}: invalid ISO date '{value}'") from exc
    raise PlanError(f"{ctx}: expected ISO date string")


def _coerce_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise PlanError(f"{ctx}: expected non-empty string")
    return value


def _ensure_dict(value: Any, ctx: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise PlanError(f"{ctx}: expected a mapping")
    return deepcopy(value)


def _ensure_list(value: Any, ctx: str, *, allow_none: bool = False) -> list[Any] | None:
    if value is None:
        if allow_none:
            return None
        raise PlanError(f"{ctx}: expected a list")
    if not isinstance(value, list):
        raise PlanError(f"{ctx}: expected a list")
    return list(value)
