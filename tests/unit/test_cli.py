import json

import pytest
from typer.testing import CliRunner

from maestro_health.cli import app


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("MAESTRO_HEALTH_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.delenv("MAESTRO_HEALTH_SOURCE", raising=False)


def test_analyze_demo_workflows():
    runner = CliRunner()
    result = runner.invoke(app, ["analyze"])
    assert (
        result.exit_code == 0
    ), f"Command failed with exit code {result.exit_code}. Output: {result.stdout}"
    output = result.stdout
    for workflow_id in ("wf-001", "wf-002", "wf-003", "wf-004", "wf-005"):
        assert workflow_id in output, f"{workflow_id} not found in output: {output}"
    assert "Status: critical" in output
    assert "External API call failures detected (12 failures)" in output
    assert "No issues detected. Workflow is running smoothly." in output


def test_analyze_single_workflow_as_json():
    runner = CliRunner()
    result = runner.invoke(app, ["analyze", "wf-003", "--json"])
    assert result.exit_code == 0, result.stdout
    reports = json.loads(result.stdout)
    assert len(reports) == 1
    report = reports[0]
    assert report["workflow_id"] == "wf-003"
    assert report["health"]["status"] == "critical"
    assert [r["priority"] for r in report["recommendations"]] == [
        "critical",
        "critical",
        "high",
        "medium",
    ]


def test_analyze_missing_workflow():
    runner = CliRunner()
    result = runner.invoke(app, ["analyze", "wf-999"])
    assert result.exit_code == 1
    assert "Workflow not found" in result.stdout


def test_analyze_reports_invalid_records(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(
        "workflows:\n"
        "  - id: wf-1\n"
        "    baseline_duration_seconds: 60\n"
        "    executions:\n"
        "      - {status: completed, duration: -5}\n"
    )
    runner = CliRunner()
    result = runner.invoke(app, ["analyze", "--source", str(path)])
    assert result.exit_code == 1
    assert "Invalid execution record at index 0" in result.stdout


def test_analyze_reports_empty_history(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text(
        "workflows:\n"
        "  - id: wf-1\n"
        "    baseline_duration_seconds: 60\n"
        "    executions: []\n"
    )
    runner = CliRunner()
    result = runner.invoke(app, ["analyze", "--source", str(path)])
    assert result.exit_code == 1
    assert "without execution records" in result.stdout


def test_summary_counts_statuses():
    runner = CliRunner()
    result = runner.invoke(app, ["summary"])
    assert result.exit_code == 0, result.stdout
    assert "Healthy workflows: 2" in result.stdout
    assert "Needs attention:   2" in result.stdout
    assert "Critical issues:   1" in result.stdout
    assert "Avg completion:" in result.stdout


def test_rules_lists_table_in_order():
    runner = CliRunner()
    result = runner.invoke(app, ["rules"])
    assert result.exit_code == 0, result.stdout
    lines = result.stdout.strip().splitlines()
    assert lines[0].startswith("critical")
    assert "api-retry" in lines[0]
    assert "external_failure_count > 0" in lines[0]


def test_rules_rejects_bad_rule_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(
        "- priority: low\n"
        "  condition: {metric: bogus, value: 1}\n"
        "  action: a\n"
        "  impact: b\n"
    )
    runner = CliRunner()
    result = runner.invoke(app, ["rules", "--rules", str(path)])
    assert result.exit_code == 1
    assert "Unknown stats metric: bogus" in result.stdout


def test_watch_runs_for_lifespan():
    runner = CliRunner()
    result = runner.invoke(app, ["watch", "--interval", "0.05", "--lifespan", "0.12"])
    assert result.exit_code == 0, result.stdout
    assert result.stdout.count("Last update:") >= 2


def test_analyze_reports_malformed_source(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("workflows:\n  - id: [unclosed\n")
    runner = CliRunner()
    result = runner.invoke(app, ["analyze", "--source", str(path)])
    assert result.exit_code == 1
    assert "is not valid YAML" in result.stdout


def test_rules_reports_malformed_rule_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("rules:\n  - name: [unclosed\n")
    runner = CliRunner()
    result = runner.invoke(app, ["rules", "--rules", str(path)])
    assert result.exit_code == 1
    assert "is not valid YAML" in result.stdout


@pytest.mark.parametrize("interval", ["0", "-1"])
def test_watch_rejects_non_positive_interval(interval):
    runner = CliRunner()
    result = runner.invoke(app, ["watch", f"--interval={interval}", "--lifespan", "0.05"])
    assert result.exit_code == 1
    assert "--interval must be a positive number of seconds" in result.stdout


def test_watch_reports_missing_source(tmp_path):
    runner = CliRunner()
    result = runner.invoke(app, ["watch", "--source", str(tmp_path / "nope.yaml")])
    assert result.exit_code == 1
    assert "Execution source not found" in result.stdout
