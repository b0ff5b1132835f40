#!/usr/bin/env python3
"""
PlantUML Backend - Renders a ScheduleResult as a PlantUML Gantt chart
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Union

import requests

from planner_config import PlannerConfig
from resource_ledger import WorkerDay
from schedule_result import ScheduleResult


def generate_plantuml_script(result: ScheduleResult, config: PlannerConfig) -> str:
    """Generate the @startgantt ... @endgantt script for a schedule"""
    lines: List[str] = ["@startgantt", f"title {result.title}"]

    for day_name in result.closed_day_names:
        lines.append(f"{day_name} are closed")

    for worker, days in result.workers_absence.items():
        for d in days:
            lines.append(f"{{{worker}}} is off on {d}")

    # the default resources footbox is replaced by the ledger rows below
    lines.append("hide ressources footbox")

    for d in result.public_holidays:
        lines.append(f"{d} is colored in {config.colors['worker_pub_holidays']}")

    lines.extend(["", f"Project starts {result.project_starts}", ""])

    for t in result.tasks:
        lines.append(f"[{t.name}] as [{t.id}] on {{{t.assignee}}} starts {t.start_on}")
        lines.append(f"[{t.id}] ends at {t.end_on}")
        for p in t.pause_days:
            lines.append(f"[{t.id}] pauses on {p}")
    lines.append("")

    for t in result.tasks:
        for after in t.after:
            lines.append(f"[{after}] -> [{t.id}]")

    ledger = result.resource_allocation
    for worker in ledger.workers():
        lines.append(f"-- {worker} --")
        prev = None
        for i, (d, entry) in enumerate(ledger.entries(worker)):
            bar = f"{worker}_{i}"
            lines.append(f"[.] as [{bar}] starts {d} and requires 1 days")
            lines.append(f"[{bar}] is colored in {config.day_color(entry.kind)}")
            if prev is not None:
                lines.append(f"[{bar}] displays on same row as [{prev}]")
            prev = bar

    marker_color = config.colors["time_markers"]
    for tm in result.time_markers:
        for span in tm.time:
            lines.append(f"{span.start} to {span.end} are named [{tm.label}]")
            lines.append(f"{span.start} to {span.end} are colored in {marker_color}")

    lines.extend(["", "legend", "Resource allocation legend:", "|= Color |= Day Type |"])
    for kind in WorkerDay:
        lines.append(f"|<#{config.day_color(kind)}>| {kind.value} |")
    lines.append("end legend")
    lines.append("@endgantt")

    return "\n".join(lines) + "\n"


def render_local(config: PlannerConfig, script_file: Path, out_dir: Path) -> bool:
    """Render a script with the configured local PlantUML command"""
    cmd = [
        str(script_file) if arg == "<INPUT>" else str(out_dir) if arg == "<OUTPUT_DIR>" else arg
        for arg in config.plantuml.local_cmd.split()
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        logging.warning(f"PlantUML command not found: {cmd[0]}")
        return False

    if result.returncode == 0:
        if result.stdout.strip():
            logging.info(result.stdout.strip())
        logging.info(f"Gantt chart rendered to: {out_dir}")
        return True

    logging.error(f"Failed to render PlantUML diagram: {result.stderr}")
    return False


def render_api(config: PlannerConfig, script: str, output_file: Path) -> bool:
    """Render a script to PNG through a PlantUML server"""
    url = f"{config.plantuml.api_url}/png"
    try:
        response = requests.post(
            url,
            data=script.encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
            timeout=60,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logging.error(f"PlantUML server request failed: {e}")
        return False

    output_file.write_bytes(response.content)
    logging.info(f"Gantt chart rendered to: {output_file}")
    return True


def build_chart(
    result: ScheduleResult,
    config: PlannerConfig,
    out_dir: Union[str, Path],
    proj_name: str,
    use_api: bool = False,
) -> bool:
    """
    Write the PlantUML script next to the project and render it

    Args:
        result: Finished schedule
        config: Backend configuration
        out_dir: Directory for <proj_name>.txt and the rendered image
        proj_name: Base name of the output files
        use_api: Render through the PlantUML server instead of the local command

    Returns:
        True if the chart image was produced
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    script = generate_plantuml_script(result, config)
    script_file = out_dir / f"{proj_name}.txt"
    script_file.write_text(script, encoding="utf-8")
    logging.info(f"PlantUML script saved to: {script_file}")

    if use_api or config.plantuml.use_api:
        return render_api(config, script, out_dir / f"{proj_name}.png")
    return render_local(config, script_file, out_dir)
