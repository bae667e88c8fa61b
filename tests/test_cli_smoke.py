import json

from drawdown.__main__ import main
from tests.helpers import SAMPLE_SCENARIO, clone_scenario, write_scenario


def test_validate_mode_exits_zero(capsys):
    code = main([str(SAMPLE_SCENARIO), "--validate"])
    assert code == 0
    assert "Scenario is valid." in capsys.readouterr().out


def test_invalid_scenario_returns_one(tmp_path, sample_scenario_dict, capsys):
    data = clone_scenario(sample_scenario_dict)
    data["profile"]["life_expectancy"] = 60
    path = write_scenario(tmp_path, data)

    code = main([str(path), "--validate"])
    assert code == 1
    assert "ERROR: profile.life_expectancy" in capsys.readouterr().err


def test_missing_scenario_file_returns_two(tmp_path):
    missing = tmp_path / "nope.json"
    code = main([str(missing), "--validate"])
    assert code == 2


def test_malformed_json_returns_two(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    code = main([str(path)])
    assert code == 2
    assert "Failed to load scenario" in capsys.readouterr().err


def test_default_run_prints_summary(capsys):
    code = main([str(SAMPLE_SCENARIO)])
    out = capsys.readouterr().out

    assert code == 0
    assert "Recommended strategy:" in out
    assert "Tax savings vs Roth First" in out
    for name in ("Tax-Optimized", "Traditional First", "Roth First", "Proportional"):
        assert name in out


def test_policy_table(capsys):
    code = main([str(SAMPLE_SCENARIO), "--policy", "roth_first"])
    out = capsys.readouterr().out

    assert code == 0
    assert "Roth First year-by-year" in out
    assert "Recommended strategy:" not in out
    # Header, rule, title and one row per year.
    assert len(out.strip().splitlines()) == 3 + 25


def test_output_writes_json_report(tmp_path, sample_scenario_dict):
    scenario_path = write_scenario(tmp_path, sample_scenario_dict)
    output_path = tmp_path / "out.json"

    code = main([str(scenario_path), "--summary", "--baseline", "traditional_first", "-o", str(output_path)])

    assert code == 0
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert payload["baseline"] == "traditional_first"
    assert [r["policy"] for r in payload["results"]] == [
        "tax_optimized",
        "traditional_first",
        "roth_first",
        "proportional",
    ]
    assert all(len(r["years"]) == 25 for r in payload["results"])
    assert len(payload["scenario_hash"]) == 12
    assert payload["filing_status"] == "married_filing_jointly"
    assert len(payload["brackets"]) == 7


def test_non_finite_age_returns_two(tmp_path, sample_scenario_dict, capsys):
    data = clone_scenario(sample_scenario_dict)
    data["profile"]["current_age"] = float("inf")
    scenario_path = write_scenario(tmp_path, data)

    code = main([str(scenario_path), "--validate"])
    assert code == 2
    assert "profile.current_age: expected integer" in capsys.readouterr().err
