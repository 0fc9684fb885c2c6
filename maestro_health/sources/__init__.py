"""Sources of workflow execution history."""

from __future__ import annotations

import os
from typing import Optional

from ..config import MaestroHealthConfig, load_config
from .base import ExecutionSource
from .demo import demo_snapshots
from .file import FileExecutionSource, parse_snapshot
from .inmemory import InMemoryExecutionSource


def get_source(
    path: Optional[str] = None, config: Optional[MaestroHealthConfig] = None
) -> ExecutionSource:
    """Factory function to obtain an execution source.

    The source is selected from ``path``, the ``MAESTRO_HEALTH_SOURCE``
    environment variable, or the ``source_path`` of the loaded configuration.
    When none is set, the bundled demo workflows are served from memory.
    """

    config = config or load_config()
    source_path = path or os.getenv("MAESTRO_HEALTH_SOURCE") or config.source_path
    if not source_path:
        return InMemoryExecutionSource(demo_snapshots())
    if not os.path.exists(source_path):
        raise FileNotFoundError(f"Execution source not found: {source_path}")
    return FileExecutionSource(source_path)


__all__ = [
    "ExecutionSource",
    "FileExecutionSource",
    "InMemoryExecutionSource",
    "demo_snapshots",
    "get_source",
    "parse_snapshot",
]
