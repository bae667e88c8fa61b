import pytest

from drawdown.compare import compare_scenario
from drawdown.report import build_payload, render_summary, render_year_table, write_report
from drawdown.withdrawals import WithdrawalPolicy
from tests.helpers import SAMPLE_SCENARIO


def test_payload_includes_every_policy(sample_scenario):
    outcome = compare_scenario(sample_scenario)
    payload = build_payload(outcome, scenario_path=SAMPLE_SCENARIO)

    assert payload["best"] == outcome.best.policy.value
    assert payload["baseline"] == "roth_first"
    assert len(payload["results"]) == 4

    first = payload["results"][0]
    assert first["name"] == "Tax-Optimized"
    assert first["total_taxes_paid"] == outcome.results[0].total_taxes_paid
    assert first["savings_vs_baseline"] == outcome.savings_vs_baseline(outcome.results[0])

    year = first["years"][0]
    assert year["age"] == 65
    assert set(year["ending_balances"]) == {"taxable", "traditional", "roth", "hsa"}
    assert set(year["withdrawals"]) == {"taxable", "traditional", "roth", "hsa"}


def test_payload_without_scenario_path_has_no_hash(sample_scenario):
    payload = build_payload(compare_scenario(sample_scenario))
    assert payload["scenario_hash"] is None


def test_summary_marks_best_policy(sample_scenario):
    outcome = compare_scenario(sample_scenario)
    text = render_summary(outcome)

    assert text.startswith(f"Recommended strategy: {outcome.best.policy_name}")
    assert f"{outcome.best.policy_name} *" in text


def test_summary_omits_savings_without_baseline(sample_scenario):
    text = render_summary(compare_scenario(sample_scenario, baseline=None))
    assert "Tax savings" not in text


def test_year_table_has_row_per_year(sample_scenario):
    outcome = compare_scenario(sample_scenario)
    text = render_year_table(outcome.result_for(WithdrawalPolicy.PROPORTIONAL))

    lines = text.splitlines()
    assert lines[0] == "Proportional year-by-year"
    assert len(lines) == 3 + 25
    assert lines[3].lstrip().startswith("65")


def test_write_report_round_trips_json(tmp_path, sample_scenario):
    path = tmp_path / "report.json"
    payload = build_payload(compare_scenario(sample_scenario))
    write_report(path, payload)
    assert path.read_text(encoding="utf-8").startswith("{")


def test_payload_carries_descriptions_and_bracket_breakdown(sample_scenario):
    outcome = compare_scenario(sample_scenario)
    payload = build_payload(outcome, filing_status=sample_scenario.profile.filing_status)

    assert payload["filing_status"] == "married_filing_jointly"
    assert payload["results"][0]["description"] == WithdrawalPolicy.TAX_OPTIMIZED.description
    brackets = payload["brackets"]
    assert len(brackets) == 7
    assert brackets[0]["upper_bound"] == 23_200.0
    assert brackets[0]["tax_on_bracket"] == pytest.approx(2_320.0)
    assert brackets[-1]["upper_bound"] is None


def test_payload_without_filing_status_has_no_brackets(sample_scenario):
    payload = build_payload(compare_scenario(sample_scenario))
    assert "brackets" not in payload
