from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from payofflab.core.errors import ValidationError
from payofflab.core.kinds import PaymentFrequency, PayoffMethod
from payofflab.core.plan_loader import PlanError, dump_plan, load_plan

PLAN_PATH = Path(__file__).resolve().parents[1] / "data" / "plans" / "household.yaml"


def _write_plan(tmp_path: Path) -> Path:
    path = tmp_path / "plan.yaml"
    path.write_text(PLAN_PATH.read_text(encoding="utf-8"), encoding="utf-8")
    return path


def test_load_plan_yaml(tmp_path: Path) -> None:
    plan = load_plan(_write_plan(tmp_path))

    assert plan.settings.method is PayoffMethod.SNOWBALL
    assert plan.settings.frequency is PaymentFrequency.BIWEEKLY
    assert plan.settings.extra_monthly_payment == Decimal("150")
    assert plan.start_date == date(2026, 1, 1)
    assert plan.currency == "USD"
    assert [d.id for d in plan.debts] == ["visa", "store", "car", "old"]
    assert plan.debts[0].billing_cycle_days == 30
    assert plan.lump_sums[0].period == 6
    assert plan.lump_sums[0].amount == Decimal("1200")
    assert [s.id for s in plan.scenarios] == ["current", "minimums", "aggressive"]
    assert plan.scenarios[2].method is PayoffMethod.AVALANCHE


def test_load_plan_json_and_mapping(tmp_path: Path) -> None:
    data = {
        "settings": {"extraMonthlyPayment": 25},
        "debts": [{"id": "a", "remainingBalance": 100, "minimumPayment": 10, "interestRate": 3}],
    }
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(data), encoding="utf-8")

    from_file = load_plan(path)
    from_mapping = load_plan(data)

    assert from_file.debts == from_mapping.debts
    assert from_file.settings.extra_monthly_payment == Decimal("25")
    assert from_file.settings.method is PayoffMethod.AVALANCHE
    assert from_mapping.source == "<mapping>"
    assert from_file.start_date is None


def test_dump_plan_round_trips_settings(tmp_path: Path) -> None:
    plan = load_plan(_write_plan(tmp_path))
    again = load_plan(dump_plan(plan))

    assert again.debts == plan.debts
    assert again.settings == plan.settings
    assert again.lump_sums == plan.lump_sums


def test_missing_file() -> None:
    with pytest.raises(FileNotFoundError):
        load_plan("does/not/exist.yaml")


@pytest.mark.parametrize(
    "text, suffix",
    [
        ("- just\n- a list\n", "yaml"),
        ("settings: {}\n", "yaml"),
        ("debts: {}\n", "yaml"),
        ("debts: []\nsettings: {method: fastest}\n", "yaml"),
        ("debts: []\nsettings: {lump_sums: [{period: 0, amount: 5}]}\n", "yaml"),
        ("debts: []\nscenarios: [{name: no id}]\n", "yaml"),
        ("debts: [\n", "yaml"),
        ("{not json", "json"),
        ("debts = []", "toml"),
    ],
)
def test_invalid_plan_raises(tmp_path: Path, text: str, suffix: str) -> None:
    bad = tmp_path / f"bad.{suffix}"
    bad.write_text(text, encoding="utf-8")
    with pytest.raises(PlanError):
        load_plan(bad)


def test_invalid_debt_raises_validation_error() -> None:
    with pytest.raises(ValidationError):
        load_plan({"debts": [{"id": "a", "remaining_balance": -1, "minimum_payment": 1, "interest_rate": 1}]})
