"""Rule table tests."""

import pytest

from maestro_health import DEFAULT_RULES, RuleDefinitionError
from maestro_health.config import MaestroHealthConfig
from maestro_health.contracts import HealthStatus, Priority, WorkflowStats
from maestro_health.rules import AllOf, Condition, load_rules, load_rules_file, rules_from_config


def _stats(**overrides) -> WorkflowStats:
    fields = dict(
        baseline_duration_seconds=60,
        status=HealthStatus.HEALTHY,
        completion_rate_percent=99.0,
        total=100,
        completed=99,
        failed=1,
        in_progress=0,
    )
    fields.update(overrides)
    return WorkflowStats(**fields)


def test_mapping_condition_is_parsed() -> None:
    (rule,) = load_rules(
        [
            {
                "name": "api-retry",
                "priority": "critical",
                "condition": {"metric": "external_failure_count", "op": "gt", "value": 0},
                "action": "Retry API calls",
                "impact": "Fewer failures",
            }
        ]
    )
    assert isinstance(rule.condition, Condition)
    assert rule.priority == Priority.CRITICAL
    assert rule.describe_condition() == "external_failure_count > 0"
    assert rule.matches(_stats(external_failure_count=3))
    assert not rule.matches(_stats())


def test_condition_list_requires_all() -> None:
    (rule,) = load_rules(
        [
            {
                "priority": "high",
                "condition": [
                    {"metric": "status", "op": "eq", "value": "critical"},
                    {"metric": "duration_ratio", "op": "gt", "value": 2},
                ],
                "action": "Extend expiration",
                "impact": "Fewer expirations",
            }
        ]
    )
    assert isinstance(rule.condition, AllOf)
    assert rule.matches(_stats(status=HealthStatus.CRITICAL, duration_ratio=3.0))
    assert not rule.matches(_stats(status=HealthStatus.CRITICAL, duration_ratio=1.0))
    assert not rule.matches(_stats(duration_ratio=3.0))


def test_unknown_metric_is_rejected() -> None:
    with pytest.raises(RuleDefinitionError):
        load_rules(
            [
                {
                    "priority": "low",
                    "condition": {"metric": "no_such_metric", "value": 1},
                    "action": "a",
                    "impact": "b",
                }
            ]
        )


def test_unknown_operator_is_rejected() -> None:
    with pytest.raises(RuleDefinitionError):
        load_rules(
            [
                {
                    "priority": "low",
                    "condition": {"metric": "failed", "op": "between", "value": 1},
                    "action": "a",
                    "impact": "b",
                }
            ]
        )


def test_unknown_priority_is_rejected() -> None:
    with pytest.raises(RuleDefinitionError):
        load_rules(
            [
                {
                    "priority": "urgent",
                    "condition": {"metric": "failed", "value": 1},
                    "action": "a",
                    "impact": "b",
                }
            ]
        )


def test_load_rules_file(tmp_path) -> None:
    rules_path = tmp_path / "rules.yaml"
    rules_path.write_text(
        """
rules:
  - name: first
    priority: medium
    condition: {metric: timeout_count, op: gt, value: 0}
    action: Add reminders
    impact: Faster responses
  - name: second
    priority: critical
    condition: {metric: routing_failure_count, op: ge, value: 1}
    action: Split batches
    impact: Fix routing
"""
    )
    rules = load_rules_file(rules_path)
    assert [r.name for r in rules] == ["first", "second"]


def test_rules_from_config_prefers_configured_table() -> None:
    config = MaestroHealthConfig(
        rules=[
            {
                "name": "only",
                "priority": "low",
                "condition": {"metric": "failed", "op": "gt", "value": 0},
                "action": "Review failures",
                "impact": "Awareness",
            }
        ]
    )
    assert [r.name for r in rules_from_config(config)] == ["only"]
    assert rules_from_config(MaestroHealthConfig()) == DEFAULT_RULES
    assert rules_from_config(None) == DEFAULT_RULES


def test_default_rules_are_declarative() -> None:
    assert DEFAULT_RULES
    for rule in DEFAULT_RULES:
        assert rule.name
        assert isinstance(rule.condition, (Condition, AllOf))


def _single_condition(condition: dict) -> list:
    return load_rules([{"priority": "low", "condition": condition, "action": "a", "impact": "b"}])


def test_numeric_string_value_is_coerced() -> None:
    (rule,) = _single_condition({"metric": "failed", "op": "gt", "value": "0"})
    assert rule.condition.value == 0
    assert rule.matches(_stats(failed=2))
    assert not rule.matches(_stats(failed=0))


def test_non_numeric_value_for_count_metric_is_rejected() -> None:
    with pytest.raises(RuleDefinitionError, match="not valid for metric failed"):
        _single_condition({"metric": "failed", "op": "gt", "value": "many"})


def test_status_condition_only_supports_equality() -> None:
    with pytest.raises(RuleDefinitionError, match="only supports eq/ne"):
        _single_condition({"metric": "status", "op": "gt", "value": "warning"})


def test_status_value_must_be_a_known_status() -> None:
    with pytest.raises(RuleDefinitionError):
        _single_condition({"metric": "status", "op": "eq", "value": "bogus"})


def test_status_condition_matches_by_status() -> None:
    (rule,) = _single_condition({"metric": "status", "op": "ne", "value": "healthy"})
    assert rule.describe_condition() == "status != healthy"
    assert rule.matches(_stats(status=HealthStatus.WARNING))
    assert not rule.matches(_stats())


def test_malformed_rule_file_is_rejected(tmp_path) -> None:
    rules_path = tmp_path / "rules.yaml"
    rules_path.write_text("rules:\n  - name: [unclosed\n")
    with pytest.raises(RuleDefinitionError, match="not valid YAML"):
        load_rules_file(rules_path)
