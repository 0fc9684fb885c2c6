"""Example showing how to analyze workflows from an execution source."""

import asyncio

from maestro_health import analyze_workflow, get_source, load_config, summarize_fleet


async def main():
    """Analyze every workflow and print a short report."""
    config = load_config()
    source = get_source(config=config)

    snapshots = await source.list_snapshots()
    reports = [analyze_workflow(s, config=config) for s in snapshots]

    for report in reports:
        print(f"{report.workflow_id}: {report.health.status.value} "
              f"({report.health.completion_rate_percent:.1f}%)")
        for issue in report.issues:
            print(f"  ⚠ {issue.message}")
        for rec in report.recommendations:
            print(f"  [{rec.priority.value}] {rec.action}")

    summary = summarize_fleet(reports)
    print(f"📊 {summary.healthy} healthy, {summary.warning} warning, "
          f"{summary.critical} critical, avg {summary.average_completion_percent:.1f}%")


if __name__ == "__main__":
    asyncio.run(main())
