"""Bundled demo data mirroring a typical access-management workflow fleet."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from ..contracts import ExecutionRecord, WorkflowBaseline, WorkflowSnapshot

# (count, record fields) pairs describing failed executions.
FailureSpec = Sequence[Tuple[int, Dict[str, Any]]]


def _executions(
    completed: int, duration: float, failures: FailureSpec = ()
) -> List[ExecutionRecord]:
    records = [
        ExecutionRecord(status="completed", duration=duration) for _ in range(completed)
    ]
    for count, fields in failures:
        records.extend(
            ExecutionRecord(status="failed", duration=duration, **fields)
            for _ in range(count)
        )
    return records


def _snapshot(
    workflow_id: str,
    name: str,
    baseline_seconds: float,
    executions: List[ExecutionRecord],
) -> WorkflowSnapshot:
    return WorkflowSnapshot(
        workflow_id=workflow_id,
        name=name,
        baseline=WorkflowBaseline(baseline_duration_seconds=baseline_seconds),
        executions=executions,
    )


def demo_snapshots() -> List[WorkflowSnapshot]:
    """Return five workflows spanning healthy, warning and critical states."""
    return [
        _snapshot(
            "wf-001",
            "Employee Onboarding - IT Access Provisioning",
            140,
            _executions(337, 138, [(5, {"error_code": "validation_error"})]),
        ),
        _snapshot(
            "wf-002",
            "Contractor Access Request & Approval",
            174,
            _executions(
                136,
                522,
                [(20, {"error_code": "timeout", "failure_reason": "Approval timeout"})],
            ),
        ),
        _snapshot(
            "wf-003",
            "Quarterly Access Review & Recertification",
            900,
            _executions(
                56,
                2712,
                [
                    (12, {"error_code": "api_error", "failure_reason": "API connection failure to AD"}),
                    (13, {"error_code": "routing_error", "failure_reason": "Conditional routing failed for manager"}),
                    (8, {"failure_reason": "Envelope expired before completion"}),
                ],
            ),
        ),
        _snapshot(
            "wf-004",
            "Offboarding - Access Revocation",
            110,
            _executions(275, 108, [(3, {"error_code": "validation_error"})]),
        ),
        _snapshot(
            "wf-005",
            "Role Change - Permission Update",
            300,
            _executions(
                186,
                312,
                [(17, {"failure_reason": "Recipient routing delay exceeded"})],
            ),
        ),
    ]
