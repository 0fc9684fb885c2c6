"""In-memory execution source."""

from __future__ import annotations

from typing import Dict, Iterable

from ..contracts import WorkflowSnapshot
from .base import ExecutionSource


class InMemoryExecutionSource(ExecutionSource):
    """Serve snapshots held in local memory.

    Useful for tests and for the bundled demo data.
    """

    def __init__(self, snapshots: Iterable[WorkflowSnapshot] = ()) -> None:
        self._snapshots: Dict[str, WorkflowSnapshot] = {}
        for snapshot in snapshots:
            self.add(snapshot)

    def add(self, snapshot: WorkflowSnapshot) -> None:
        self._snapshots[snapshot.workflow_id] = snapshot

    async def list_snapshots(self) -> list[WorkflowSnapshot]:
        return list(self._snapshots.values())

    async def get_snapshot(self, workflow_id: str) -> WorkflowSnapshot | None:
        return self._snapshots.get(workflow_id)
