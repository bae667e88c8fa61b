"""Text and JSON rendering for policy comparisons."""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, datetime
import hashlib
import json
from pathlib import Path

from .compare import ComparisonOutcome
from .schema import FilingStatus
from .simulation import StrategyResult
from .tax import bracket_breakdown


def _money(value: float) -> str:
    return f"${value:,.0f}"


def _result_payload(outcome: ComparisonOutcome, result: StrategyResult) -> dict[str, object]:
    return {
        "policy": result.policy.value,
        "name": result.policy_name,
        "description": result.policy.description,
        "total_taxes_paid": result.total_taxes_paid,
        "ending_balance": result.ending_balance,
        "average_tax_per_year": result.average_tax_per_year,
        "savings_vs_baseline": outcome.savings_vs_baseline(result),
        "years": [asdict(record) for record in result.year_records],
    }


def build_payload(
    outcome: ComparisonOutcome,
    scenario_path: str | Path | None = None,
    filing_status: FilingStatus | None = None,
) -> dict[str, object]:
    scenario_hash = None
    if scenario_path is not None:
        scenario_hash = hashlib.sha256(Path(scenario_path).read_bytes()).hexdigest()[:12]
    payload: dict[str, object] = {
        "generated": datetime.now(UTC).isoformat(timespec="seconds"),
        "scenario_hash": scenario_hash,
        "best": outcome.best.policy.value,
        "baseline": outcome.baseline.policy.value if outcome.baseline else None,
        "results": [_result_payload(outcome, result) for result in outcome.results],
    }
    if filing_status is not None:
        payload["filing_status"] = filing_status.value
        payload["brackets"] = [asdict(row) for row in bracket_breakdown(filing_status)]
    return payload


def render_summary(outcome: ComparisonOutcome) -> str:
    best = outcome.best
    lines = [f"Recommended strategy: {best.policy_name}"]
    lines.append(f"Lifetime taxes: {_money(best.total_taxes_paid)}")
    lines.append(f"Ending balance: {_money(best.ending_balance)}")
    if outcome.baseline is not None:
        lines.append(f"Tax savings vs {outcome.baseline.policy_name}: {_money(outcome.savings_vs_baseline())}")
    lines.append("")

    header = f"{'Strategy':<20}{'Lifetime tax':>16}{'Ending balance':>18}{'Avg tax/yr':>14}"
    lines.append(header)
    lines.append("-" * len(header))
    for result in outcome.results:
        marker = " *" if result is best else ""
        lines.append(
            f"{result.policy_name + marker:<20}"
            f"{_money(result.total_taxes_paid):>16}"
            f"{_money(result.ending_balance):>18}"
            f"{_money(result.average_tax_per_year):>14}"
        )
    return "\n".join(lines)


def render_year_table(result: StrategyResult) -> str:
    header = (
        f"{'Age':>4}{'Taxable':>12}{'Traditional':>13}{'Roth':>12}{'HSA':>11}"
        f"{'Tax':>10}{'Rate':>6}{'Balance':>14}"
    )
    lines = [f"{result.policy_name} year-by-year", header, "-" * len(header)]
    for record in result.year_records:
        w = record.withdrawals
        lines.append(
            f"{record.age:>4}"
            f"{_money(w.taxable):>12}"
            f"{_money(w.traditional):>13}"
            f"{_money(w.roth):>12}"
            f"{_money(w.hsa):>11}"
            f"{_money(record.tax_paid):>10}"
            f"{record.marginal_rate:>6.0%}"
            f"{_money(record.ending_balances.total):>14}"
        )
    return "\n".join(lines)


def write_report(path: str | Path, payload: dict[str, object]) -> None:
    Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
