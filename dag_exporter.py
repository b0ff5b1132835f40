#!/usr/bin/env python3
"""
DAG Exporter - Exports the task dependency graph with Graphviz
"""

import logging
from typing import Dict, Iterable, Optional

from graphviz import CalledProcessError, Digraph, ExecutableNotFound

from schedule_result import ScheduledTask


def build_dag(
    tasks: Iterable[ScheduledTask], estimates: Optional[Dict[str, float]] = None
) -> Digraph:
    """Build a Digraph with one box per task and an edge per dependency"""
    tasks = list(tasks)
    estimates = estimates or {}
    known = {t.id for t in tasks}

    dot = Digraph(comment="Task Dependencies")
    dot.attr(rankdir="LR")
    dot.attr("node", shape="box")

    for t in tasks:
        label = f"{t.id}\n{t.name}"
        if t.id in estimates:
            label += f"\n{estimates[t.id]}d"
        label += f"\n{t.assignee}\n{t.start_on} .. {t.end_on}"
        color = "lightsalmon" if t.pause_days else "lightblue"
        dot.node(t.id, label=label, style="filled", fillcolor=color)

    for t in tasks:
        for parent in t.after:
            if parent in known:
                dot.edge(parent, t.id)

    return dot


def export_dag(
    tasks: Iterable[ScheduledTask],
    filename: str = "task_dag.dot",
    estimates: Optional[Dict[str, float]] = None,
) -> None:
    """Export dependency graph in DOT format and generate PNG using graphviz library"""
    logging.info(f"Exporting DAG to {filename}...")
    dot = build_dag(tasks, estimates)

    dot.save(filename)
    logging.info(f"Exported DOT file to {filename}")

    dot_path = filename[: -len(".dot")] if filename.endswith(".dot") else filename
    try:
        dot.render(dot_path, format="png", cleanup=False)
        logging.info(f"Generated image: {dot_path}.png")
    except (ExecutableNotFound, CalledProcessError) as e:
        logging.warning(f"Failed to generate PNG: {e}")
        logging.warning("Make sure the Graphviz binaries are installed")
