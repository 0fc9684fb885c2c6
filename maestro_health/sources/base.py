"""Protocol for collaborators supplying workflow execution history."""

from __future__ import annotations

from typing import Protocol

from ..contracts import WorkflowSnapshot


class ExecutionSource(Protocol):
    """Protocol for execution history backends."""

    async def list_snapshots(self) -> list[WorkflowSnapshot]:
        """Return the execution history of every known workflow."""

    async def get_snapshot(self, workflow_id: str) -> WorkflowSnapshot | None:
        """Retrieve the execution history of one workflow by id."""
