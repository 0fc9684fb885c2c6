"""Health evaluator tests."""

import pytest

from maestro_health import EmptyInputError, InvalidRecordError, evaluate_health
from maestro_health.config import HealthThresholds
from maestro_health.contracts import ExecutionRecord, HealthStatus
from maestro_health.health import classify_completion_rate


def _records(completed: int, failed: int = 0, in_progress: int = 0) -> list[dict]:
    return (
        [{"status": "completed"}] * completed
        + [{"status": "failed"}] * failed
        + [{"status": "in_progress"}] * in_progress
    )


def test_ninety_five_percent_is_healthy() -> None:
    result = evaluate_health(_records(19, 1))
    assert result.completion_rate_percent == 95.0
    assert result.status == HealthStatus.HEALTHY
    assert (result.total, result.completed, result.failed, result.in_progress) == (20, 19, 1, 0)


def test_eighty_five_percent_is_warning() -> None:
    result = evaluate_health(_records(17, 3))
    assert result.completion_rate_percent == 85.0
    assert result.status == HealthStatus.WARNING


def test_below_warning_threshold_is_critical() -> None:
    result = evaluate_health(_records(56, 30, 3))
    assert result.status == HealthStatus.CRITICAL
    assert result.in_progress == 3
    assert result.completed + result.failed + result.in_progress <= result.total


def test_cancelled_counts_toward_total_only() -> None:
    records = _records(9) + [{"status": "cancelled"}]
    result = evaluate_health(records)
    assert result.total == 10
    assert result.completion_rate_percent == 90.0
    assert result.completed + result.failed + result.in_progress == 9


def test_empty_records_raise() -> None:
    with pytest.raises(EmptyInputError):
        evaluate_health([])


def test_unknown_status_raises_invalid_record() -> None:
    with pytest.raises(InvalidRecordError) as exc_info:
        evaluate_health([{"status": "completed"}, {"status": "paused"}])
    assert exc_info.value.index == 1


def test_negative_duration_raises_invalid_record() -> None:
    with pytest.raises(InvalidRecordError):
        evaluate_health([{"status": "completed", "duration": -1}])


def test_accepts_models_and_camel_case_mappings() -> None:
    records = [
        ExecutionRecord(status="completed"),
        {"status": "failed", "errorCode": "timeout", "failureReason": "timeout"},
    ]
    result = evaluate_health(records)
    assert result.total == 2
    assert result.completion_rate_percent == 50.0


def test_evaluation_is_idempotent() -> None:
    records = _records(7, 2, 1)
    assert evaluate_health(records) == evaluate_health(records)


@pytest.mark.parametrize("completed", range(0, 21))
def test_rate_is_bounded(completed: int) -> None:
    result = evaluate_health(_records(completed, 20 - completed))
    assert 0 <= result.completion_rate_percent <= 100


def test_classification_is_monotonic() -> None:
    order = [HealthStatus.CRITICAL, HealthStatus.WARNING, HealthStatus.HEALTHY]
    previous = 0
    for tenth in range(0, 1001):
        rank = order.index(classify_completion_rate(tenth / 10))
        assert rank >= previous
        previous = rank


def test_custom_thresholds() -> None:
    thresholds = HealthThresholds(healthy_min_percent=99, warning_min_percent=90)
    assert evaluate_health(_records(19, 1), thresholds).status == HealthStatus.WARNING
    assert classify_completion_rate(89.9, thresholds) == HealthStatus.CRITICAL


def test_thresholds_must_be_ordered() -> None:
    with pytest.raises(ValueError):
        HealthThresholds(healthy_min_percent=80, warning_min_percent=90)
