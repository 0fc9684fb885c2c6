"""maestro-health: health scoring, issue detection and recommendations for workflows."""

from .config import MaestroHealthConfig, load_config
from .contracts import (
    ExecutionRecord,
    HealthResult,
    Issue,
    Recommendation,
    WorkflowBaseline,
    WorkflowReport,
    WorkflowSnapshot,
    WorkflowStats,
)
from .errors import EmptyInputError, InvalidRecordError, RuleDefinitionError
from .health import evaluate_health
from .issues import detect_issues
from .pipeline import analyze_workflow, summarize_fleet
from .recommendations import build_workflow_stats, generate_recommendations
from .rules import DEFAULT_RULES, Rule
from .sources import get_source

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_RULES",
    "EmptyInputError",
    "ExecutionRecord",
    "HealthResult",
    "InvalidRecordError",
    "Issue",
    "MaestroHealthConfig",
    "Recommendation",
    "Rule",
    "RuleDefinitionError",
    "WorkflowBaseline",
    "WorkflowReport",
    "WorkflowSnapshot",
    "WorkflowStats",
    "analyze_workflow",
    "build_workflow_stats",
    "detect_issues",
    "evaluate_health",
    "generate_recommendations",
    "get_source",
    "load_config",
    "summarize_fleet",
]
