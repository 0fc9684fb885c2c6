"""Execution source backed by a YAML or JSON document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Union

import yaml
from pydantic import ValidationError

from ..contracts import WorkflowSnapshot, coerce_records
from ..errors import InvalidRecordError
from .base import ExecutionSource

logger = logging.getLogger(__name__)


def parse_snapshot(data: Mapping[str, Any], index: int = 0) -> WorkflowSnapshot:
    """Build a snapshot from one ``workflows`` entry of a source document."""
    if not isinstance(data, Mapping):
        raise InvalidRecordError(f"Workflow entry {index} must be a mapping", index=index)
    entry = dict(data)
    entry["executions"] = coerce_records(entry.get("executions") or [])
    try:
        return WorkflowSnapshot.model_validate(entry)
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        raise InvalidRecordError(
            f"Invalid workflow entry {index} ({location}): {error['msg']}", index=index
        ) from exc


class FileExecutionSource(ExecutionSource):
    """Read workflow snapshots from a document shaped like::

        workflows:
          - id: wf-001
            name: Employee Onboarding
            baseline_duration_seconds: 140
            executions:
              - {status: completed, duration: 132}
              - {status: failed, errorCode: timeout}

    The file is re-read on every call so edits show up on the next refresh.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _load(self) -> list[WorkflowSnapshot]:
        with open(self.path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise InvalidRecordError(f"{self.path} is not valid YAML: {exc}") from exc
        entries = data.get("workflows", []) if isinstance(data, Mapping) else data
        if not isinstance(entries, list):
            raise InvalidRecordError(f"{self.path}: 'workflows' must be a list")
        snapshots = [parse_snapshot(entry, index) for index, entry in enumerate(entries)]
        logger.debug(f"Loaded {len(snapshots)} workflows from {self.path}")
        return snapshots

    async def list_snapshots(self) -> list[WorkflowSnapshot]:
        return self._load()

    async def get_snapshot(self, workflow_id: str) -> WorkflowSnapshot | None:
        return next((s for s in self._load() if s.workflow_id == workflow_id), None)
