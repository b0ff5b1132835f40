#!/usr/bin/env python3
"""
Planner - Schedules a project against team calendars and draws its Gantt chart

Usage:
    python planner.py examples/simple_project.toml \
        --cfg planner.cfg.toml \
        --output-dir output \
        --export-dag \
        --ledger-chart
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from backend_plantuml import build_chart
from dag_exporter import export_dag
from ledger_chart import plot_resource_ledger
from planner_config import load_config
from planner_errors import PlannerError
from project_config import load_calendars, load_project
from resource_ledger import WorkerDay
from schedule_result import ScheduleResult
from scheduler import process


def generate_summary_report(result: ScheduleResult) -> str:
    """Generate a text summary report"""
    ledger = result.resource_allocation
    span_days = (result.project_ends - result.project_starts).days + 1

    report = [
        "=" * 60,
        f"PROJECT SCHEDULE: {result.title}",
        "=" * 60,
        "",
        f"Project Start: {result.project_starts}",
        f"Project End: {result.project_ends}",
        f"Calendar Duration: {span_days} days",
        f"Tasks: {len(result.tasks)}",
        "",
        "TASKS:",
        "-" * 6,
    ]

    for t in result.tasks:
        pauses = f", {len(t.pause_days)} pause days" if t.pause_days else ""
        report.append(f"  {t.id}: {t.name} [{t.assignee}] {t.start_on} -> {t.end_on}{pauses}")

    report.extend(["", "WORKER LOAD:", "-" * 12])
    for worker in ledger.workers():
        entries = ledger.entries(worker)
        committed = sum(entry.hours for _, entry in entries)
        overloaded: List[str] = [
            str(d) for d, entry in entries if entry.kind is WorkerDay.OVERLOADED
        ]
        report.append(f"  {worker}: {committed:.1f}h committed")
        if overloaded:
            report.append(f"    Overloaded on: {', '.join(overloaded)}")

    if result.public_holidays:
        report.extend(["", "PUBLIC HOLIDAYS IN SPAN:", "-" * 24])
        report.append("  " + ", ".join(str(d) for d in result.public_holidays))

    return "\n".join(report)


def main():
    parser = argparse.ArgumentParser(
        description="Draws a Gantt chart based on the input project"
    )
    parser.add_argument("project_file", metavar="PROJECT_TOML", help="Project definition file")
    parser.add_argument("--cfg", "-c", dest="config_file", help="Backend configuration file")
    parser.add_argument(
        "--api-server", "-a", action="store_true", help="Render through the PlantUML server"
    )
    parser.add_argument(
        "--output-dir", help="Output directory (default: the project file's directory)"
    )
    parser.add_argument("--json", action="store_true", help="Output the schedule as JSON")
    parser.add_argument(
        "--export-dag", action="store_true", help="Export dependency graph as DOT file"
    )
    parser.add_argument(
        "--ledger-chart", action="store_true", help="Save a resource ledger heat map"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args()

    # Setup logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(asctime)s - %(levelname)s - %(message)s")

    project_path = Path(args.project_file)
    out_dir = Path(args.output_dir) if args.output_dir else project_path.parent
    proj_name = project_path.stem

    try:
        config = load_config(args.config_file)

        logging.info(f"Loading project: {project_path}")
        project = load_project(project_path)
        calendars = load_calendars(project, project_path.parent)
        logging.info(f"Found {len(project.tasks)} tasks, {len(project.team)} team members")

        logging.info("Scheduling tasks...")
        result = process(project, calendars)
        logging.info(f"Project ends on {result.project_ends}")

        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            print(generate_summary_report(result))

        build_chart(result, config, out_dir, proj_name, use_api=args.api_server)

        if args.export_dag:
            estimates = {t.id: t.estimate for t in project.tasks}
            export_dag(result.tasks, str(out_dir / f"{proj_name}_dag.dot"), estimates)

        if args.ledger_chart:
            plot_resource_ledger(result, str(out_dir / f"{proj_name}_ledger.png"), config)

    except (PlannerError, OSError) as e:
        logging.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
