"""
Command-line interface for PayoffLab.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

from payofflab import __version__
from payofflab.core.errors import ValidationError
from payofflab.core.plan_loader import DebtPlan, PlanError, load_plan
from payofflab.core.engine import compare_methods, simulate
from payofflab.core.whatif import Scenario, compare_scenarios

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CAPPED = 2

EXAMPLE_PLAN = {
    "settings": {
        "method": "avalanche",
        "frequency": "monthly",
        "extra_monthly_payment": "200",
        "start_date": "2026-01-01",
        "currency": "USD",
    },
    "debts": [
        {
            "id": "visa",
            "name": "Visa Card",
            "remaining_balance": "4200",
            "minimum_payment": "120",
            "interest_rate": "24.99",
            "loan_type": "revolving",
            "compounding_frequency": "daily",
            "billing_cycle_days": 30,
        },
        {
            "id": "store",
            "name": "Store Card",
            "remaining_balance": "850",
            "minimum_payment": "35",
            "interest_rate": "27.5",
        },
        {
            "id": "car",
            "name": "Car Loan",
            "remaining_balance": "11500",
            "minimum_payment": "310",
            "interest_rate": "6.4",
            "loan_type": "installment",
        },
    ],
    "scenarios": [
        {"id": "current", "name": "Current plan", "extra_monthly_payment": "200"},
        {"id": "minimums", "name": "Minimums only", "extra_monthly_payment": "0"},
        {"id": "aggressive", "name": "Aggressive", "extra_monthly_payment": "500"},
        {
            "id": "bonus",
            "name": "Tax refund",
            "extra_monthly_payment": "200",
            "lump_sums": [{"period": 4, "amount": "1500"}],
        },
    ],
}


def _dump(data: dict, output: str | None = None) -> None:
    """Write JSON to ``output`` or stdout."""
    if output:
        with open(output, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        print(f"Results saved to {output}")
    else:
        json.dump(data, sys.stdout, indent=2)
        sys.stdout.write("\n")


def _load(path: str) -> DebtPlan | None:
    """Load a plan, reporting problems on stderr; None on failure."""
    try:
        return load_plan(path)
    except FileNotFoundError as e:
        print(f"Plan file not found: {e}", file=sys.stderr)
    except PlanError as e:
        print(f"Invalid plan: {e}", file=sys.stderr)
    except ValidationError as e:
        print(str(e), file=sys.stderr)
    return None


def _start_date(args, plan: DebtPlan) -> date:
    if getattr(args, "start", None):
        return args.start
    return plan.start_date or date.today()


def cmd_example(_) -> int:
    """Print a sample debt plan."""
    json.dump(EXAMPLE_PLAN, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return EXIT_OK


def cmd_validate(args) -> int:
    """Validate a debt plan."""
    try:
        plan = load_plan(args.input)
    except FileNotFoundError as e:
        print(f"Plan file not found: {e}", file=sys.stderr)
        return EXIT_INVALID
    except PlanError as e:
        report = {"is_valid": False, "error": str(e), "issues": []}
    except ValidationError as e:
        report = {"is_valid": False, "error": "invalid debts", **e.to_dict()}
    else:
        report = {
            "is_valid": True,
            "debts": len(plan.debts),
            "active_debts": sum(1 for d in plan.debts if not d.is_paid_off),
            "scenarios": len(plan.scenarios),
        }

    if args.format == "json":
        json.dump(report, sys.stdout, indent=2)
        sys.stdout.write("\n")
    elif report["is_valid"]:
        print(
            f"OK: {report['debts']} debts ({report['active_debts']} active), "
            f"{report['scenarios']} scenarios"
        )
    else:
        print(f"Validation failed: {report['error']}")
        for issue in report.get("issues", []):
            print(f"  - {issue['debt_id'] or issue['index']}.{issue['field']}: {issue['reason']}")
    return EXIT_OK if report["is_valid"] else EXIT_INVALID


def cmd_simulate(args) -> int:
    """Run one payoff projection for a plan."""
    plan = _load(args.input)
    if plan is None:
        return EXIT_INVALID

    settings = plan.settings
    try:
        result = simulate(
            plan.debts,
            args.extra if args.extra is not None else settings.extra_monthly_payment,
            args.method or settings.method,
            args.frequency or settings.frequency,
            _start_date(args, plan),
            lump_sums=plan.lump_sums,
            currency=plan.currency,
        )
    except ValidationError as e:
        print(str(e), file=sys.stderr)
        return EXIT_INVALID

    _dump(result.summary() if args.summary else result.to_dict(), args.output)
    return EXIT_OK if result.converged else EXIT_CAPPED


def cmd_compare(args) -> int:
    """Compare avalanche against snowball for a plan."""
    plan = _load(args.input)
    if plan is None:
        return EXIT_INVALID

    settings = plan.settings
    try:
        comparison = compare_methods(
            plan.debts,
            args.extra if args.extra is not None else settings.extra_monthly_payment,
            settings.frequency,
            _start_date(args, plan),
            lump_sums=plan.lump_sums,
            currency=plan.currency,
        )
    except ValidationError as e:
        print(str(e), file=sys.stderr)
        return EXIT_INVALID

    _dump(comparison.to_dict())
    converged = comparison.avalanche.converged and comparison.snowball.converged
    return EXIT_OK if converged else EXIT_CAPPED


def cmd_scenarios(args) -> int:
    """Compare the plan's what-if scenarios."""
    plan = _load(args.input)
    if plan is None:
        return EXIT_INVALID

    settings = plan.settings
    scenarios = plan.scenarios or [
        Scenario(
            id="plan",
            name="Plan settings",
            extra_monthly_payment=settings.extra_monthly_payment,
            method=settings.method,
            frequency=settings.frequency,
            lump_sums=plan.lump_sums,
        )
    ]
    try:
        comparison = compare_scenarios(
            plan.debts, scenarios, _start_date(args, plan), currency=plan.currency
        )
    except ValidationError as e:
        print(str(e), file=sys.stderr)
        return EXIT_INVALID

    _dump(comparison.to_dict())
    if all(o.result.converged for o in comparison.outcomes):
        return EXIT_OK
    return EXIT_CAPPED


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payofflab", description="PayoffLab - Debt payoff simulation engine"
    )

    parser.add_argument("--version", action="version", version=f"PayoffLab {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging on stderr"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True, help="Available commands")

    # Example command
    example_parser = subparsers.add_parser("example", help="Print a sample debt plan")
    example_parser.set_defaults(func=cmd_example)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a debt plan")
    validate_parser.add_argument("-i", "--input", required=True, help="Plan file (YAML or JSON)")
    validate_parser.add_argument(
        "--format", choices=["human", "json"], default="human", help="Output format"
    )
    validate_parser.set_defaults(func=cmd_validate)

    # Simulate command
    simulate_parser = subparsers.add_parser(
        "simulate", help="Project the payoff of a plan and export JSON results"
    )
    simulate_parser.add_argument("-i", "--input", required=True, help="Plan file (YAML or JSON)")
    simulate_parser.add_argument("-o", "--output", help="Output results JSON file")
    simulate_parser.add_argument(
        "--method", choices=["avalanche", "snowball"], help="Override the plan's method"
    )
    simulate_parser.add_argument(
        "--frequency",
        choices=["monthly", "biweekly", "weekly"],
        help="Override the plan's payment frequency",
    )
    simulate_parser.add_argument("--extra", help="Override the extra payment per period")
    simulate_parser.add_argument(
        "--start", type=date.fromisoformat, help="Start date (YYYY-MM-DD)"
    )
    simulate_parser.add_argument(
        "--summary", action="store_true", help="Only print the summary"
    )
    simulate_parser.epilog = """
Exit codes:
  0  all debts paid off within the safety horizon
  1  invalid plan or arguments
  2  simulation capped at the safety horizon (plan never pays off)
    """
    simulate_parser.set_defaults(func=cmd_simulate)

    # Compare command
    compare_parser = subparsers.add_parser("compare", help="Compare avalanche vs. snowball")
    compare_parser.add_argument("-i", "--input", required=True, help="Plan file (YAML or JSON)")
    compare_parser.add_argument("--extra", help="Override the extra payment per period")
    compare_parser.add_argument(
        "--start", type=date.fromisoformat, help="Start date (YYYY-MM-DD)"
    )
    compare_parser.set_defaults(func=cmd_compare)

    # Scenarios command
    scenarios_parser = subparsers.add_parser(
        "scenarios", help="Compare the plan's what-if scenarios"
    )
    scenarios_parser.add_argument("-i", "--input", required=True, help="Plan file (YAML or JSON)")
    scenarios_parser.add_argument(
        "--start", type=date.fromisoformat, help="Start date (YYYY-MM-DD)"
    )
    scenarios_parser.set_defaults(func=cmd_scenarios)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
