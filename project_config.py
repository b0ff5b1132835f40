#!/usr/bin/env python3
"""
Project Config - Project, team and assignment definitions and their TOML loader
"""

import logging
import math
import tomllib
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from calendar_index import BusinessCalendar, DateSpan, load_calendar, parse_date, parse_date_spans
from planner_errors import ConfigError, UnknownCalendar


class Task:
    """A unit of work with an estimate in (8 hour) days and its dependencies"""

    def __init__(self, id: str, name: str, estimate: float, after: Optional[List[str]] = None):
        if estimate < 0 or not math.isfinite(estimate):
            raise ConfigError(
                f"Estimate must be a finite non-negative number, got {estimate} for task {id}"
            )
        self.id = id
        self.name = name
        self.estimate = float(estimate)
        self.after: List[str] = list(after or [])

    def __repr__(self):
        return f"Task({self.id}, {self.estimate}d, after={self.after})"


class Assignment:
    """Binds a task to its owner, optionally overriding the owner's focus factor"""

    def __init__(self, task: str, owner: str, focus_factor: Optional[float] = None):
        if focus_factor is not None:
            _check_focus_factor(focus_factor, f"assignment of task '{task}'")
        self.task = task
        self.owner = owner
        self.focus_factor = focus_factor

    def __repr__(self):
        ff = f", ff={self.focus_factor}" if self.focus_factor is not None else ""
        return f"Assignment({self.task} -> {self.owner}{ff})"


class TeamMember:
    def __init__(
        self,
        name: str,
        base_calendar: str,
        focus_factor: float = 1.0,
        holidays: Optional[List[DateSpan]] = None,
        other_duties: Optional[List[DateSpan]] = None,
    ):
        _check_focus_factor(focus_factor, f"team member '{name}'")
        self.name = name
        self.base_calendar = base_calendar
        self.focus_factor = float(focus_factor)
        self.holidays: List[DateSpan] = list(holidays or [])
        self.other_duties: List[DateSpan] = list(other_duties or [])

    def __repr__(self):
        return f"TeamMember({self.name}, cal={self.base_calendar}, ff={self.focus_factor})"


class TimeMarker:
    """Labelled dates passed through to the chart unchanged"""

    def __init__(self, label: str, time: List[DateSpan]):
        self.label = label
        self.time = time

    def __repr__(self):
        return f"TimeMarker({self.label}, {self.time})"


class ProjectConfig:
    """Everything the scheduler needs about a project, already parsed"""

    def __init__(
        self,
        project_name: str,
        start_date: date,
        team: List[TeamMember],
        tasks: List[Task],
        assignments: List[Assignment],
        time_markers: Optional[List[TimeMarker]] = None,
    ):
        self.project_name = project_name
        self.start_date = start_date
        self.team = team
        self.tasks = tasks
        self.assignments = assignments
        self.time_markers = time_markers or []

    def calendar_names(self) -> List[str]:
        """Distinct calendar references in team order"""
        names: List[str] = []
        for member in self.team:
            if member.base_calendar not in names:
                names.append(member.base_calendar)
        return names

    def __repr__(self):
        return (
            f"ProjectConfig({self.project_name}, starts={self.start_date}, "
            f"{len(self.tasks)} tasks, {len(self.team)} members)"
        )


def _check_focus_factor(value: float, owner: str) -> None:
    if not 0 < value <= 1:
        raise ConfigError(f"Focus factor must be in (0, 1], got {value} for {owner}")


def _parse_after(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [dep.strip() for dep in value.split(",") if dep.strip()]
    return [str(dep).strip() for dep in value]


def parse_project(data: Dict[str, Any]) -> ProjectConfig:
    """
    Build a ProjectConfig from a parsed TOML document

    Args:
        data: Dictionary with project_name, start_date, team, tasks,
            assignments and optional time_markers

    Returns:
        ProjectConfig instance
    """
    try:
        team = [
            TeamMember(
                name=m["name"],
                base_calendar=m["base_calendar"],
                focus_factor=float(m.get("focus_factor", 1.0)),
                holidays=parse_date_spans(m.get("holidays")),
                other_duties=parse_date_spans(m.get("other_duties")),
            )
            for m in data.get("team", [])
        ]
        tasks = [
            Task(
                id=str(t["id"]),
                name=t.get("name", str(t["id"])),
                estimate=float(t["estimate"]),
                after=_parse_after(t.get("after")),
            )
            for t in data.get("tasks", [])
        ]
        assignments = [
            Assignment(
                task=str(a["task"]),
                owner=a["owner"],
                focus_factor=float(a["focus_factor"]) if a.get("focus_factor") is not None else None,
            )
            for a in data.get("assignments", [])
        ]
        time_markers = [
            TimeMarker(tm["label"], parse_date_spans(tm["time"]))
            for tm in data.get("time_markers", [])
        ]
        project = ProjectConfig(
            project_name=data["project_name"],
            start_date=parse_date(data["start_date"]),
            team=team,
            tasks=tasks,
            assignments=assignments,
            time_markers=time_markers,
        )
    except ConfigError:
        raise
    except KeyError as e:
        raise ConfigError(f"Missing required key in project definition: {e}") from e
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Malformed project definition: {e}") from e

    logging.debug(f"Parsed {project}")
    return project


def load_project(path: Union[str, Path]) -> ProjectConfig:
    """Load a ProjectConfig from a TOML file"""
    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in project file {path}: {e}") from e
    return parse_project(data)


def load_calendars(
    project: ProjectConfig, base_dir: Union[str, Path]
) -> Dict[str, BusinessCalendar]:
    """Load every calendar referenced by the team, relative to base_dir"""
    base_dir = Path(base_dir)
    calendars: Dict[str, BusinessCalendar] = {}
    for member in project.team:
        ref = member.base_calendar
        if ref in calendars:
            continue
        path = base_dir / ref
        if not path.is_file():
            raise UnknownCalendar(member.name, ref)
        logging.info(f"Loading calendar: {path}")
        calendars[ref] = load_calendar(path, name=ref)
    return calendars
