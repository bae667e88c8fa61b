"""CLI entry point for drawdown."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from .compare import compare_scenario
from .report import build_payload, render_summary, render_year_table, write_report
from .schema import SchemaError, load_scenario
from .validate import validate_scenario
from .withdrawals import WithdrawalPolicy, parse_policy

POLICY_CHOICES = [policy.value for policy in WithdrawalPolicy]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compare retirement withdrawal strategies by lifetime tax")
    parser.add_argument("scenario", help="Path to scenario JSON file")
    parser.add_argument("-o", "--output", help="Write the full comparison as JSON to this path")
    parser.add_argument("--validate", action="store_true", help="Validate JSON only")
    parser.add_argument("--summary", action="store_true", help="Print text summary to stdout")
    parser.add_argument("--policy", choices=POLICY_CHOICES, help="Print the year-by-year table for one policy")
    parser.add_argument(
        "--baseline",
        choices=POLICY_CHOICES,
        default=WithdrawalPolicy.ROTH_FIRST.value,
        help="Policy that tax savings are measured against (default: roth_first)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _print_validation(errors: list[str], warnings: list[str]) -> None:
    for warning in warnings:
        print(f"WARNING: {warning}")
    for error in errors:
        print(f"ERROR: {error}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        scenario = load_scenario(args.scenario)
    except (SchemaError, OSError, ValueError) as exc:
        print(f"Failed to load scenario: {exc}", file=sys.stderr)
        return 2

    validation = validate_scenario(scenario)
    _print_validation(validation.errors, validation.warnings)
    if not validation.is_valid:
        return 1

    if args.validate:
        print("Scenario is valid.")
        return 0

    outcome = compare_scenario(scenario, baseline=parse_policy(args.baseline))

    if args.summary or not (args.output or args.policy):
        print(render_summary(outcome))
    if args.policy:
        print(render_year_table(outcome.result_for(parse_policy(args.policy))))
    if args.output:
        payload = build_payload(outcome, scenario_path=args.scenario, filing_status=scenario.profile.filing_status)
        write_report(args.output, payload)
        print(f"Wrote report to {Path(args.output)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
