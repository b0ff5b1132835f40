#!/usr/bin/env python3
"""
Planner Config - Rendering backend settings (PlantUML invocation and chart colors)
"""

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from planner_errors import ConfigError
from resource_ledger import WorkerDay

DEFAULT_API_URL = "https://www.plantuml.com/plantuml"
DEFAULT_LOCAL_CMD = "plantuml -tpng <INPUT> -o <OUTPUT_DIR>"

DEFAULT_COLORS = {
    "worker_pub_holidays": "salmon",
    "worker_holidays": "lightgreen",
    "worker_other_duties": "orange",
    "worker_overloaded": "red",
    "worker_underloaded": "yellow",
    "worker_fine": "green",
    "worker_unassigned": "lightgray",
    "time_markers": "lightblue",
}

_DAY_COLOR_KEYS = {
    WorkerDay.PUB_HOLIDAYS: "worker_pub_holidays",
    WorkerDay.HOLIDAYS: "worker_holidays",
    WorkerDay.OTHER_DUTIES: "worker_other_duties",
    WorkerDay.OVERLOADED: "worker_overloaded",
    WorkerDay.UNDERLOADED: "worker_underloaded",
    WorkerDay.FINE: "worker_fine",
    WorkerDay.UNASSIGNED: "worker_unassigned",
}


class PlantUMLConfig:
    def __init__(
        self,
        use_api: bool = False,
        api_url: str = DEFAULT_API_URL,
        local_cmd: str = DEFAULT_LOCAL_CMD,
    ):
        self.use_api = use_api
        self.api_url = api_url.rstrip("/")
        self.local_cmd = local_cmd


class PlannerConfig:
    """Backend configuration with built-in defaults for every key"""

    def __init__(self, plantuml: Optional[PlantUMLConfig] = None, colors: Optional[Dict] = None):
        self.plantuml = plantuml or PlantUMLConfig()
        self.colors: Dict[str, str] = dict(DEFAULT_COLORS)
        if colors:
            unknown = set(colors) - set(DEFAULT_COLORS)
            if unknown:
                raise ConfigError(f"Unknown color keys: {', '.join(sorted(unknown))}")
            self.colors.update(colors)

    def day_color(self, kind: WorkerDay) -> str:
        return self.colors[_DAY_COLOR_KEYS[kind]]


def parse_config(data: Dict[str, Any]) -> PlannerConfig:
    backend = data.get("backend", {})
    plantuml = backend.get("plantuml", {})
    api_url = os.getenv("PLANTUML_SERVER_URL") or plantuml.get("api_url", DEFAULT_API_URL)
    return PlannerConfig(
        plantuml=PlantUMLConfig(
            use_api=bool(plantuml.get("use_api", False)),
            api_url=api_url,
            local_cmd=plantuml.get("local_cmd", DEFAULT_LOCAL_CMD),
        ),
        colors=backend.get("colors"),
    )


def load_config(path: Optional[Union[str, Path]] = None) -> PlannerConfig:
    """Load backend configuration from TOML, or the defaults when no path is given"""
    if path is None:
        return parse_config({})
    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e
    return parse_config(data)
