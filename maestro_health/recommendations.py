"""Rule-table driven recommendation engine."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .contracts import (
    HealthResult,
    Issue,
    IssueSeverity,
    Recommendation,
    WorkflowBaseline,
    WorkflowStats,
)
from .issues import IssueSignals
from .rules import Rule

logger = logging.getLogger(__name__)


def build_workflow_stats(
    baseline: WorkflowBaseline,
    health: HealthResult,
    signals: IssueSignals,
    issues: Sequence[Issue] = (),
    workflow_id: Optional[str] = None,
    name: Optional[str] = None,
) -> WorkflowStats:
    """Merge workflow metadata, health and issue statistics."""
    average = signals.average_duration_seconds or 0.0
    return WorkflowStats(
        workflow_id=workflow_id,
        name=name,
        baseline_duration_seconds=baseline.baseline_duration_seconds,
        status=health.status,
        completion_rate_percent=health.completion_rate_percent,
        total=health.total,
        completed=health.completed,
        failed=health.failed,
        in_progress=health.in_progress,
        timeout_count=signals.timeout_count,
        timeout_rate=signals.timeout_rate,
        external_failure_count=signals.external_failure_count,
        routing_failure_count=signals.routing_failure_count,
        average_duration_seconds=average,
        duration_ratio=average / baseline.baseline_duration_seconds,
        issue_count=len(issues),
        error_issue_count=sum(1 for i in issues if i.severity == IssueSeverity.ERROR),
        warning_issue_count=sum(1 for i in issues if i.severity == IssueSeverity.WARNING),
    )


def generate_recommendations(
    stats: WorkflowStats, rules: Iterable[Rule]
) -> List[Recommendation]:
    """Evaluate ``rules`` against ``stats`` and rank the matches by priority.

    ``sorted`` is stable, so rules of equal priority keep their table order.
    """

    matched = [rule for rule in rules if rule.matches(stats)]
    ranked = sorted(matched, key=lambda rule: rule.priority.rank)
    if ranked:
        logger.debug(
            f"Matched rules for {stats.workflow_id or 'workflow'}: "
            f"{', '.join(rule.name or rule.action for rule in ranked)}"
        )
    return [rule.to_recommendation() for rule in ranked]
