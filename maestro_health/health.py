"""Completion-rate health evaluation."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .config import HealthThresholds
from .contracts import (
    ExecutionStatus,
    HealthResult,
    HealthStatus,
    RecordLike,
    coerce_records,
)
from .errors import EmptyInputError

logger = logging.getLogger(__name__)


def classify_completion_rate(
    rate_percent: float, thresholds: Optional[HealthThresholds] = None
) -> HealthStatus:
    """Map a completion rate to a health status, checking high to low."""
    thresholds = thresholds or HealthThresholds()
    if rate_percent >= thresholds.healthy_min_percent:
        return HealthStatus.HEALTHY
    if rate_percent >= thresholds.warning_min_percent:
        return HealthStatus.WARNING
    return HealthStatus.CRITICAL


def evaluate_health(
    records: Iterable[RecordLike], thresholds: Optional[HealthThresholds] = None
) -> HealthResult:
    """Reduce execution records to a completion rate and health status.

    Raises:
        EmptyInputError: If ``records`` is empty.
        InvalidRecordError: If a record fails validation.
    """

    executions = coerce_records(records)
    total = len(executions)
    if total == 0:
        raise EmptyInputError("Cannot evaluate health without execution records")

    completed = sum(1 for r in executions if r.status == ExecutionStatus.COMPLETED)
    failed = sum(1 for r in executions if r.status == ExecutionStatus.FAILED)
    in_progress = sum(1 for r in executions if r.status == ExecutionStatus.IN_PROGRESS)

    rate = 100 * completed / total
    status = classify_completion_rate(rate, thresholds)
    logger.debug(
        f"Evaluated {total} executions: {completed} completed, {failed} failed, "
        f"rate={rate:.1f}% status={status.value}"
    )
    return HealthResult(
        status=status,
        completion_rate_percent=rate,
        total=total,
        completed=completed,
        failed=failed,
        in_progress=in_progress,
    )
