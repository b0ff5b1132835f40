#!/usr/bin/env python3
"""
Ledger Chart - Worker x day heat map of the resource ledger
"""

import logging
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import ListedColormap
from matplotlib.patches import Patch

from planner_config import PlannerConfig
from resource_ledger import WorkerDay
from schedule_result import ScheduleResult

DAY_KINDS: List[WorkerDay] = list(WorkerDay)


def ledger_matrix(result: ScheduleResult) -> Tuple[np.ndarray, List[str]]:
    """
    Build the worker x day matrix of ledger classifications

    Returns:
        (matrix of indices into DAY_KINDS, worker names in row order).
        Days without an entry are -1.
    """
    ledger = result.resource_allocation
    workers = ledger.workers()
    num_days = (result.project_ends - result.project_starts).days + 1
    matrix = np.full((len(workers), num_days), -1, dtype=int)

    for row, worker in enumerate(workers):
        for day, entry in ledger.entries(worker):
            col = (day - result.project_starts).days
            if 0 <= col < num_days:
                matrix[row, col] = DAY_KINDS.index(entry.kind)

    return matrix, workers


def _color(value: str) -> str:
    # PlantUML accepts bare hex codes, matplotlib needs the '#'
    if len(value) in (6, 8) and all(c in "0123456789abcdefABCDEF" for c in value):
        return f"#{value}"
    return value


def plot_resource_ledger(
    result: ScheduleResult, output_file: str, config: Optional[PlannerConfig] = None
) -> None:
    """Plot the resource ledger and save it as an image"""
    config = config or PlannerConfig()
    matrix, workers = ledger_matrix(result)
    if not workers:
        logging.warning("Resource ledger is empty, skipping ledger chart")
        return

    colors: Dict[WorkerDay, str] = {kind: _color(config.day_color(kind)) for kind in DAY_KINDS}
    cmap = ListedColormap(["white"] + [colors[kind] for kind in DAY_KINDS])

    num_days = matrix.shape[1]
    fig, ax = plt.subplots(figsize=(max(8, num_days * 0.25), max(2, len(workers) * 0.6 + 1.5)))
    ax.imshow(matrix + 1, cmap=cmap, vmin=0, vmax=len(DAY_KINDS), aspect="auto")

    step = max(1, num_days // 20)
    ticks = list(range(0, num_days, step))
    ax.set_xticks(ticks)
    ax.set_xticklabels(
        [(result.project_starts + timedelta(days=t)).strftime("%m/%d") for t in ticks],
        rotation=45,
    )
    ax.set_yticks(range(len(workers)))
    ax.set_yticklabels(workers)
    ax.set_title(f"{result.title} - Resource Allocation")

    ax.legend(
        handles=[Patch(facecolor=colors[kind], label=kind.value) for kind in DAY_KINDS],
        loc="upper center",
        bbox_to_anchor=(0.5, -0.25),
        ncol=len(DAY_KINDS),
        fontsize="small",
    )

    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches="tight")
    plt.close(fig)

    logging.info(f"Ledger chart saved to: {output_file}")
