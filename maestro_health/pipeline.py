"""Per-workflow analysis and fleet-level aggregation."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .config import MaestroHealthConfig
from .contracts import FleetSummary, HealthStatus, WorkflowReport, WorkflowSnapshot
from .errors import EmptyInputError
from .health import evaluate_health
from .issues import count_issue_signals, issues_from_signals, log_issues
from .recommendations import build_workflow_stats, generate_recommendations
from .rules import Rule, rules_from_config

logger = logging.getLogger(__name__)


def analyze_workflow(
    snapshot: WorkflowSnapshot,
    config: Optional[MaestroHealthConfig] = None,
    rules: Optional[Iterable[Rule]] = None,
) -> WorkflowReport:
    """Run health evaluation, issue detection and recommendations for one workflow.

    Args:
        snapshot: Execution history and baseline of the workflow.
        config: Thresholds to apply. Defaults are used when omitted.
        rules: Rule table. Falls back to the configured table, then to
            ``DEFAULT_RULES``.

    Raises:
        EmptyInputError: If the snapshot has no executions.
    """

    config = config or MaestroHealthConfig()
    rule_table = list(rules) if rules is not None else rules_from_config(config)

    health = evaluate_health(snapshot.executions, config.health)
    signals = count_issue_signals(snapshot.executions)
    issues = issues_from_signals(signals, snapshot.baseline, config.issues)
    log_issues(issues, snapshot.workflow_id)
    stats = build_workflow_stats(
        snapshot.baseline,
        health,
        signals,
        issues,
        workflow_id=snapshot.workflow_id,
        name=snapshot.name,
    )
    recommendations = generate_recommendations(stats, rule_table)

    logger.info(
        f"Analyzed workflow {snapshot.workflow_id}: status={health.status.value} "
        f"issues={len(issues)} recommendations={len(recommendations)}"
    )
    return WorkflowReport(
        workflow_id=snapshot.workflow_id,
        name=snapshot.name,
        health=health,
        issues=issues,
        recommendations=recommendations,
        stats=stats,
    )


def summarize_fleet(reports: Iterable[WorkflowReport]) -> FleetSummary:
    """Count workflows per status and average their completion rates."""
    reports = list(reports)
    if not reports:
        raise EmptyInputError("Cannot summarize an empty set of workflows")

    def _count(status: HealthStatus) -> int:
        return sum(1 for r in reports if r.health.status == status)

    average = sum(r.health.completion_rate_percent for r in reports) / len(reports)
    return FleetSummary(
        total_workflows=len(reports),
        healthy=_count(HealthStatus.HEALTHY),
        warning=_count(HealthStatus.WARNING),
        critical=_count(HealthStatus.CRITICAL),
        average_completion_percent=average,
    )
