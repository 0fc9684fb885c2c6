"""Example showing a custom rule table mixing declarative and callable conditions."""

from maestro_health import Rule, analyze_workflow
from maestro_health.rules import DEFAULT_RULES, load_rules
from maestro_health.sources import demo_snapshots

rules = DEFAULT_RULES + load_rules(
    [
        {
            "name": "page-on-call",
            "priority": "critical",
            "condition": {"metric": "completion_rate_percent", "op": "lt", "value": 70},
            "action": "Page the on-call workflow owner",
            "impact": "Shorten time to mitigation",
        },
        Rule(
            name="stuck-instances",
            condition=lambda stats: stats.in_progress > stats.total * 0.2,
            priority="medium",
            action="Inspect instances stuck in progress",
            impact="Unblock waiting recipients",
        ),
    ]
)


def main():
    for snapshot in demo_snapshots():
        report = analyze_workflow(snapshot, rules=rules)
        print(f"{report.workflow_id} ({report.health.status.value})")
        for rec in report.recommendations:
            print(f"  [{rec.priority.value}] {rec.action} -> {rec.impact}")


if __name__ == "__main__":
    main()
