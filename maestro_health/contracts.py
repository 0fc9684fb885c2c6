"""Value objects exchanged between the analysis stages."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import InvalidRecordError


class ExecutionStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    IN_PROGRESS = "in_progress"
    CANCELLED = "cancelled"


class ErrorCode(str, Enum):
    TIMEOUT = "timeout"
    API_ERROR = "api_error"
    ROUTING_ERROR = "routing_error"
    VALIDATION_ERROR = "validation_error"
    NONE = "none"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class IssueSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class IssueKind(str, Enum):
    TIMEOUT_RATE = "timeout_rate"
    EXTERNAL_FAILURE = "external_failure"
    ROUTING_FAILURE = "routing_failure"
    DURATION_REGRESSION = "duration_regression"


class Priority(str, Enum):
    """Recommendation priority, ordered critical < high < medium < low."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


class ExecutionRecord(BaseModel):
    """One observed run of a workflow instance."""

    status: ExecutionStatus
    error_code: Optional[ErrorCode] = Field(default=None, alias="errorCode")
    failure_reason: Optional[str] = Field(default=None, alias="failureReason")
    duration: Optional[float] = Field(default=None, ge=0)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


RecordLike = Union[ExecutionRecord, Mapping[str, Any]]


def coerce_records(records: Iterable[RecordLike]) -> List[ExecutionRecord]:
    """Validate ``records`` into :class:`ExecutionRecord` instances.

    Mappings are parsed; existing model instances pass through untouched.

    Raises:
        InvalidRecordError: If any record has an unknown status, a negative
            duration or otherwise fails validation.
    """

    coerced: List[ExecutionRecord] = []
    for index, record in enumerate(records):
        if isinstance(record, ExecutionRecord):
            coerced.append(record)
            continue
        try:
            coerced.append(ExecutionRecord.model_validate(record))
        except ValidationError as exc:
            raise InvalidRecordError(
                f"Invalid execution record at index {index}: {exc.errors()[0]['msg']}",
                index=index,
            ) from exc
    return coerced


class WorkflowBaseline(BaseModel):
    """Reference metadata for a workflow."""

    baseline_duration_seconds: float = Field(..., gt=0, alias="baselineDurationSeconds")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class HealthResult(BaseModel):
    status: HealthStatus
    completion_rate_percent: float = Field(..., ge=0, le=100)
    total: int = Field(..., ge=0)
    completed: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    in_progress: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)


class Issue(BaseModel):
    """A diagnostic finding surfaced to operators."""

    kind: IssueKind
    severity: IssueSeverity
    message: str

    model_config = ConfigDict(frozen=True)


class Recommendation(BaseModel):
    priority: Priority
    action: str
    impact: str

    model_config = ConfigDict(frozen=True)


class WorkflowStats(BaseModel):
    """Workflow metadata merged with health and issue statistics.

    This is the object rule conditions are evaluated against, so every field
    here is addressable from a declarative rule table.
    """

    workflow_id: Optional[str] = None
    name: Optional[str] = None
    baseline_duration_seconds: float

    status: HealthStatus
    completion_rate_percent: float
    total: int
    completed: int
    failed: int
    in_progress: int

    timeout_count: int = 0
    timeout_rate: float = 0.0
    external_failure_count: int = 0
    routing_failure_count: int = 0
    average_duration_seconds: float = 0.0
    duration_ratio: float = 0.0

    issue_count: int = 0
    error_issue_count: int = 0
    warning_issue_count: int = 0

    model_config = ConfigDict(frozen=True)


class WorkflowSnapshot(BaseModel):
    """Execution history and baseline for a single workflow."""

    workflow_id: str = Field(..., alias="id")
    name: str = ""
    baseline: WorkflowBaseline
    executions: List[ExecutionRecord] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _fold_flat_baseline(cls, data: Any) -> Any:
        # Documents may carry the baseline inline next to the workflow id.
        if isinstance(data, Mapping) and "baseline" not in data:
            for key in ("baseline_duration_seconds", "baselineDurationSeconds"):
                if key in data:
                    data = dict(data)
                    data["baseline"] = {"baseline_duration_seconds": data.pop(key)}
                    break
        return data


class WorkflowReport(BaseModel):
    workflow_id: str
    name: str = ""
    health: HealthResult
    issues: List[Issue] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    stats: WorkflowStats


class FleetSummary(BaseModel):
    """Aggregate view across all analysed workflows."""

    total_workflows: int
    healthy: int
    warning: int
    critical: int
    average_completion_percent: float
