"""Declarative recommendation rules.

A rule pairs a condition over :class:`WorkflowStats` with the recommendation
it produces. Conditions are either plain callables or the declarative
``Condition`` form, which is what YAML rule tables are parsed into::

    - name: api-retry
      priority: critical
      condition: {metric: external_failure_count, op: gt, value: 0}
      action: Implement retry logic with exponential backoff
      impact: Should reduce API failures by 80%+

A list of conditions must all hold.
"""

from __future__ import annotations

import operator
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, List, Literal, Mapping, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from .config import MaestroHealthConfig
from .contracts import Priority, Recommendation, WorkflowStats
from .errors import RuleDefinitionError

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "gt": operator.gt,
    "ge": operator.ge,
    "lt": operator.lt,
    "le": operator.le,
    "eq": operator.eq,
    "ne": operator.ne,
}
_SYMBOLS = {"gt": ">", "ge": ">=", "lt": "<", "le": "<=", "eq": "==", "ne": "!="}
_ORDERING_OPS = {"gt", "ge", "lt", "le"}


class Condition(BaseModel):
    """Compare one ``WorkflowStats`` metric against a constant."""

    metric: str
    op: Literal["gt", "ge", "lt", "le", "eq", "ne"] = "gt"
    value: Any

    model_config = ConfigDict(frozen=True)

    @field_validator("metric")
    @classmethod
    def _known_metric(cls, v: str) -> str:
        if v not in WorkflowStats.model_fields:
            raise ValueError(f"Unknown stats metric: {v}")
        return v

    @field_validator("value")
    @classmethod
    def _value_matches_metric(cls, v: Any, info: ValidationInfo) -> Any:
        # metric and op validate first; an unknown metric has already failed.
        metric, op = info.data.get("metric"), info.data.get("op", "gt")
        if metric is None:
            return v
        annotation = WorkflowStats.model_fields[metric].annotation
        if op in _ORDERING_OPS and annotation not in (int, float):
            raise ValueError(f"Metric {metric} only supports eq/ne, not {op}")
        try:
            return TypeAdapter(annotation).validate_python(v)
        except ValidationError as exc:
            raise ValueError(f"Value {v!r} is not valid for metric {metric}") from exc

    def __call__(self, stats: WorkflowStats) -> bool:
        return _OPERATORS[self.op](getattr(stats, self.metric), self.value)

    def __str__(self) -> str:
        shown = self.value.value if isinstance(self.value, Enum) else self.value
        if isinstance(shown, float):
            shown = f"{shown:g}"
        return f"{self.metric} {_SYMBOLS[self.op]} {shown}"


class AllOf(BaseModel):
    conditions: tuple[Condition, ...]

    model_config = ConfigDict(frozen=True)

    def __call__(self, stats: WorkflowStats) -> bool:
        return all(condition(stats) for condition in self.conditions)

    def __str__(self) -> str:
        return " and ".join(str(c) for c in self.conditions)


def _as_condition(value: Any) -> Any:
    if isinstance(value, Mapping):
        try:
            return Condition.model_validate(value)
        except ValidationError as exc:
            raise ValueError(exc.errors()[0]["msg"]) from exc
    if isinstance(value, (list, tuple)):
        return AllOf(conditions=tuple(_as_condition(v) for v in value))
    return value


class Rule(BaseModel):
    """One row of the recommendation rule table."""

    name: str = ""
    condition: Callable[[WorkflowStats], bool]
    priority: Priority
    action: str
    impact: str

    model_config = ConfigDict(frozen=True)

    @field_validator("condition", mode="before")
    @classmethod
    def _parse_condition(cls, value: Any) -> Any:
        return _as_condition(value)

    def matches(self, stats: WorkflowStats) -> bool:
        return bool(self.condition(stats))

    def to_recommendation(self) -> Recommendation:
        return Recommendation(priority=self.priority, action=self.action, impact=self.impact)

    def describe_condition(self) -> str:
        if isinstance(self.condition, (Condition, AllOf)):
            return str(self.condition)
        return getattr(self.condition, "__name__", repr(self.condition))


RuleLike = Union[Rule, Mapping[str, Any]]


def load_rules(entries: Iterable[RuleLike]) -> List[Rule]:
    """Build a rule table from rule models or plain mappings, keeping order.

    Raises:
        RuleDefinitionError: If an entry is malformed or references an
            unknown metric or operator.
    """

    rules: List[Rule] = []
    for index, entry in enumerate(entries):
        if isinstance(entry, Rule):
            rules.append(entry)
            continue
        try:
            rules.append(Rule.model_validate(entry))
        except ValidationError as exc:
            raise RuleDefinitionError(
                f"Invalid rule at position {index}: {exc.errors()[0]['msg']}"
            ) from exc
    return rules


def load_rules_file(path: Union[str, Path]) -> List[Rule]:
    """Load a rule table from a YAML document.

    The document is either a list of rules or a mapping with a ``rules`` key.
    """

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or []
        except yaml.YAMLError as exc:
            raise RuleDefinitionError(f"Rule file {path} is not valid YAML: {exc}") from exc
    if isinstance(data, Mapping):
        data = data.get("rules") or []
    if not isinstance(data, list):
        raise RuleDefinitionError(f"Rule file {path} must contain a list of rules")
    return load_rules(data)


def rules_from_config(config: Optional[MaestroHealthConfig]) -> List[Rule]:
    """Return the configured rule table, or ``DEFAULT_RULES`` when unset."""
    if config is not None and config.rules:
        return load_rules(config.rules)
    return list(DEFAULT_RULES)


DEFAULT_RULES: List[Rule] = load_rules(
    [
        {
            "name": "api-retry",
            "priority": "critical",
            "condition": {"metric": "external_failure_count", "op": "gt", "value": 0},
            "action": "Implement retry logic with exponential backoff for external API calls",
            "impact": "Should reduce API failures by 80%+",
        },
        {
            "name": "split-routing-batches",
            "priority": "critical",
            "condition": {"metric": "routing_failure_count", "op": "gt", "value": 0},
            "action": (
                "Split large review batches into sub-workflows "
                "(threshold: 25 recipients)"
            ),
            "impact": "Fix routing logic failures",
        },
        {
            "name": "reduce-approval-timeout",
            "priority": "high",
            "condition": {"metric": "timeout_rate", "op": "gt", "value": 0.1},
            "action": (
                "Reduce approval timeout from 48h to 24h to prevent workflow abandonment"
            ),
            "impact": "Could improve completion rate by ~8-10%",
        },
        {
            "name": "extend-expiration",
            "priority": "high",
            "condition": [
                {"metric": "status", "op": "eq", "value": "critical"},
                {"metric": "duration_ratio", "op": "gt", "value": 2},
            ],
            "action": "Extend envelope expiration from 7 to 14 days for long-running reviews",
            "impact": "Prevent premature expiration",
        },
        {
            "name": "reminder-notifications",
            "priority": "medium",
            "condition": {"metric": "timeout_count", "op": "gt", "value": 0},
            "action": "Add reminder notifications at 12h and 20h marks",
            "impact": "Reduce average response time",
        },
        {
            "name": "parallelize-steps",
            "priority": "medium",
            "condition": {"metric": "duration_ratio", "op": "gt", "value": 2},
            "action": "Optimize parallel processing for slow workflow steps",
            "impact": "Reduce routing delays",
        },
        {
            "name": "review-failures",
            "priority": "low",
            "condition": {"metric": "status", "op": "eq", "value": "warning"},
            "action": "Schedule a review of recently failed instances",
            "impact": "Keep completion rate above the healthy threshold",
        },
    ]
)
