"""Diagnostic checks over workflow execution history.

Checks run in a fixed order against the full record set and are not
mutually exclusive: a single record can count toward several findings.
Substring matching on ``failure_reason`` is case-sensitive.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from .config import IssueThresholds
from .contracts import (
    ErrorCode,
    ExecutionRecord,
    Issue,
    IssueKind,
    IssueSeverity,
    RecordLike,
    WorkflowBaseline,
    coerce_records,
)

logger = logging.getLogger(__name__)


class IssueSignals(BaseModel):
    """Raw counts behind the issue checks."""

    total: int
    timeout_count: int = 0
    external_failure_count: int = 0
    routing_failure_count: int = 0
    average_duration_seconds: Optional[float] = None

    model_config = ConfigDict(frozen=True)

    @property
    def timeout_rate(self) -> float:
        return self.timeout_count / self.total if self.total else 0.0


def _reason_contains(record: ExecutionRecord, *needles: str) -> bool:
    reason = record.failure_reason
    if not reason:
        return False
    return any(needle in reason for needle in needles)


def is_timeout(record: ExecutionRecord) -> bool:
    return record.error_code == ErrorCode.TIMEOUT or _reason_contains(record, "timeout")


def is_external_failure(record: ExecutionRecord) -> bool:
    return record.error_code == ErrorCode.API_ERROR or _reason_contains(
        record, "connection", "API"
    )


def is_routing_failure(record: ExecutionRecord) -> bool:
    return _reason_contains(record, "routing") or record.error_code == ErrorCode.ROUTING_ERROR


def count_issue_signals(records: Iterable[RecordLike]) -> IssueSignals:
    """Count the records matching each issue category."""
    executions = coerce_records(records)
    total = len(executions)
    average = None
    if total:
        average = sum(r.duration or 0.0 for r in executions) / total
    return IssueSignals(
        total=total,
        timeout_count=sum(1 for r in executions if is_timeout(r)),
        external_failure_count=sum(1 for r in executions if is_external_failure(r)),
        routing_failure_count=sum(1 for r in executions if is_routing_failure(r)),
        average_duration_seconds=average,
    )


def issues_from_signals(
    signals: IssueSignals,
    baseline: WorkflowBaseline,
    thresholds: Optional[IssueThresholds] = None,
) -> List[Issue]:
    """Turn pre-computed signals into findings, in check order."""
    thresholds = thresholds or IssueThresholds()
    issues: List[Issue] = []

    if signals.timeout_count > thresholds.timeout_rate * signals.total:
        issues.append(
            Issue(
                kind=IssueKind.TIMEOUT_RATE,
                severity=IssueSeverity.WARNING,
                message=(
                    f"Timeout rate elevated: {signals.timeout_count} of last "
                    f"{signals.total} executions timed out "
                    f"({signals.timeout_rate * 100:.0f}%)"
                ),
            )
        )

    if signals.external_failure_count > 0:
        issues.append(
            Issue(
                kind=IssueKind.EXTERNAL_FAILURE,
                severity=IssueSeverity.ERROR,
                message=(
                    "External API call failures detected "
                    f"({signals.external_failure_count} failures)"
                ),
            )
        )

    if signals.routing_failure_count > 0:
        issues.append(
            Issue(
                kind=IssueKind.ROUTING_FAILURE,
                severity=IssueSeverity.ERROR,
                message=(
                    "Conditional routing logic failing "
                    f"({signals.routing_failure_count} instances)"
                ),
            )
        )

    average = signals.average_duration_seconds
    if signals.total and average is not None:
        limit = thresholds.duration_multiplier * baseline.baseline_duration_seconds
        if average > limit:
            ratio = average / baseline.baseline_duration_seconds
            issues.append(
                Issue(
                    kind=IssueKind.DURATION_REGRESSION,
                    severity=IssueSeverity.WARNING,
                    message=(
                        f"Average execution time {round(average / 60)}m is "
                        f"{ratio:.1f}x baseline "
                        f"(threshold {thresholds.duration_multiplier:g}x baseline)"
                    ),
                )
            )

    return issues


def detect_issues(
    records: Iterable[RecordLike],
    baseline: WorkflowBaseline,
    thresholds: Optional[IssueThresholds] = None,
) -> List[Issue]:
    """Scan execution records for timeout, failure and duration anomalies.

    Findings are returned in check order (timeout, external calls, routing,
    duration), not sorted by severity. Empty input yields no findings.
    """

    signals = count_issue_signals(records)
    issues = issues_from_signals(signals, baseline, thresholds)
    log_issues(issues)
    return issues


def log_issues(issues: Iterable[Issue], workflow_id: Optional[str] = None) -> None:
    prefix = f"{workflow_id}: " if workflow_id else ""
    for issue in issues:
        logger.warning(f"{prefix}Detected {issue.kind.value} issue: {issue.message}")
