"""Command line interface for workflow health reports."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer

from maestro_health import analyze_workflow, get_source, load_config, summarize_fleet
from maestro_health.config import MaestroHealthConfig
from maestro_health.contracts import FleetSummary, HealthStatus, WorkflowReport
from maestro_health.errors import HealthAnalysisError
from maestro_health.refresh import RefreshScheduler
from maestro_health.rules import Rule, load_rules_file, rules_from_config

app = typer.Typer(help="CLI for workflow health analysis")

_STATUS_COLORS = {
    HealthStatus.HEALTHY: typer.colors.GREEN,
    HealthStatus.WARNING: typer.colors.YELLOW,
    HealthStatus.CRITICAL: typer.colors.RED,
}


@app.callback()
def main() -> None:
    """Maestro health CLI entry point."""
    pass


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _active_rules(config: MaestroHealthConfig, rules_path: Optional[Path]) -> List[Rule]:
    if rules_path is not None:
        return load_rules_file(rules_path)
    return rules_from_config(config)


async def _collect_reports(
    config: MaestroHealthConfig,
    source_path: Optional[Path],
    rules: List[Rule],
    workflow_id: Optional[str] = None,
) -> List[WorkflowReport]:
    source = get_source(str(source_path) if source_path else None, config=config)
    if workflow_id is not None:
        snapshot = await source.get_snapshot(workflow_id)
        if snapshot is None:
            _fail(f"Workflow not found: {workflow_id}")
        snapshots = [snapshot]
    else:
        snapshots = await source.list_snapshots()
    return [analyze_workflow(s, config=config, rules=rules) for s in snapshots]


def _echo_report(report: WorkflowReport) -> None:
    health = report.health
    typer.echo(f"{report.workflow_id}  {report.name}")
    typer.secho(
        f"  Status: {health.status.value} "
        f"({health.completion_rate_percent:.1f}% of {health.total} executions completed)",
        fg=_STATUS_COLORS[health.status],
    )
    if report.issues:
        typer.echo("  Issues:")
        for issue in report.issues:
            typer.echo(f"    [{issue.severity.value}] {issue.message}")
    if report.recommendations:
        typer.echo("  Recommendations:")
        for rec in report.recommendations:
            typer.echo(f"    [{rec.priority.value}] {rec.action}")
            typer.echo(f"        -> {rec.impact}")
    if not report.issues and not report.recommendations:
        typer.echo("  No issues detected. Workflow is running smoothly.")


def _echo_summary(summary: FleetSummary) -> None:
    typer.secho(f"Healthy workflows: {summary.healthy}", fg=typer.colors.GREEN)
    typer.secho(f"Needs attention:   {summary.warning}", fg=typer.colors.YELLOW)
    typer.secho(f"Critical issues:   {summary.critical}", fg=typer.colors.RED)
    typer.echo(f"Avg completion:    {summary.average_completion_percent:.1f}%")


@app.command("analyze")
def analyze(
    workflow_id: Optional[str] = typer.Argument(None, help="Only analyze this workflow"),
    source: Optional[Path] = typer.Option(None, help="YAML/JSON execution history file"),
    rules: Optional[Path] = typer.Option(None, help="YAML rule table to use"),
    as_json: bool = typer.Option(False, "--json", help="Emit reports as JSON"),
) -> None:
    """
    Report health, issues and recommendations for each workflow.

    Without --source the bundled demo workflows are analyzed.

    Example:
        maestro-health analyze
        maestro-health analyze wf-003 --source ./executions.yaml --json
    """
    config = load_config()
    try:
        reports = asyncio.run(
            _collect_reports(config, source, _active_rules(config, rules), workflow_id)
        )
    except (HealthAnalysisError, FileNotFoundError) as exc:
        _fail(str(exc))

    if as_json:
        typer.echo(json.dumps([r.model_dump(mode="json") for r in reports], indent=2))
        return
    for report in reports:
        _echo_report(report)


@app.command("summary")
def summary(
    source: Optional[Path] = typer.Option(None, help="YAML/JSON execution history file"),
) -> None:
    """Show how many workflows are healthy, need attention or are critical."""
    config = load_config()
    try:
        reports = asyncio.run(_collect_reports(config, source, rules_from_config(config)))
        fleet = summarize_fleet(reports)
    except (HealthAnalysisError, FileNotFoundError) as exc:
        _fail(str(exc))
    _echo_summary(fleet)


@app.command("rules")
def list_rules(
    rules: Optional[Path] = typer.Option(None, help="YAML rule table to show"),
) -> None:
    """Print the active recommendation rule table in evaluation order."""
    config = load_config()
    try:
        table = _active_rules(config, rules)
    except (HealthAnalysisError, FileNotFoundError) as exc:
        _fail(str(exc))
    for rule in table:
        typer.echo(
            f"{rule.priority.value:<8} {rule.name or '-'}: "
            f"when {rule.describe_condition()} -> {rule.action}"
        )


@app.command("watch")
def watch(
    source: Optional[Path] = typer.Option(None, help="YAML/JSON execution history file"),
    interval: Optional[float] = typer.Option(None, help="Seconds between refreshes"),
    lifespan: Optional[float] = typer.Option(None, help="Stop after this many seconds"),
) -> None:
    """
    Re-run the fleet summary on a fixed interval.

    Example:
        maestro-health watch --interval 30
        maestro-health watch --source ./executions.yaml --lifespan 300
    """
    if interval is not None and interval <= 0:
        _fail("--interval must be a positive number of seconds")
    config = load_config()
    try:
        rule_table = rules_from_config(config)
        get_source(str(source) if source else None, config=config)
    except (HealthAnalysisError, FileNotFoundError) as exc:
        _fail(str(exc))

    async def refresh() -> None:
        fleet = summarize_fleet(await _collect_reports(config, source, rule_table))
        typer.echo(f"Last update: {datetime.now().strftime('%H:%M:%S')}")
        _echo_summary(fleet)

    scheduler = RefreshScheduler(
        refresh,
        interval_seconds=interval if interval is not None else config.refresh_interval_seconds,
    )
    asyncio.run(scheduler.run(lifespan=lifespan))


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
