"""Pytest configuration and fixtures."""

from datetime import date
from pathlib import Path

import pytest

from calendar_index import BusinessCalendar, PublicHoliday, parse_date_spans
from project_config import Assignment, ProjectConfig, Task, TeamMember

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


@pytest.fixture
def examples_dir():
    return EXAMPLES_DIR


@pytest.fixture
def office_calendar():
    """Mon-Fri, 8 hours a day, no public holidays."""
    return BusinessCalendar(closed_days={5, 6}, working_hours=8, name="office")


@pytest.fixture
def holiday_calendar():
    """Mon-Fri, 8 hours a day, public holiday on 2024-01-02."""
    return BusinessCalendar(
        closed_days={5, 6},
        working_hours=8,
        public_holidays=[PublicHoliday("Test Day", parse_date_spans("2024-01-02"))],
        name="holiday",
    )


@pytest.fixture
def make_project():
    """
    Factory for small projects.

    tasks: list of (id, estimate, after) tuples
    assignments: dict task id -> worker name (or (worker, focus_factor))
    team: dict worker name -> TeamMember kwargs
    """

    def _make(tasks, assignments, team=None, start=date(2024, 1, 1), calendar="office"):
        team = team or {"W": {}}
        members = []
        for name, kwargs in team.items():
            kwargs = dict(kwargs)
            kwargs.setdefault("base_calendar", calendar)
            members.append(TeamMember(name=name, **kwargs))

        task_objs = [
            Task(id=tid, name=f"Task {tid}", estimate=estimate, after=list(after))
            for tid, estimate, after in tasks
        ]

        assignment_objs = []
        for tid, owner in assignments.items():
            if isinstance(owner, tuple):
                assignment_objs.append(Assignment(tid, owner[0], focus_factor=owner[1]))
            else:
                assignment_objs.append(Assignment(tid, owner))

        return ProjectConfig(
            project_name="Test project",
            start_date=start,
            team=members,
            tasks=task_objs,
            assignments=assignment_objs,
        )

    return _make


@pytest.fixture
def sample_project_data():
    """Parsed-TOML shaped project definition."""
    return {
        "project_name": "Sample",
        "start_date": "2024-01-01",
        "team": [
            {
                "name": "Alice",
                "base_calendar": "cal.toml",
                "focus_factor": 0.8,
                "holidays": "2024-01-10:2024-01-12",
                "other_duties": "2024-01-15,2024-01-17",
            },
            {"name": "Bob", "base_calendar": "cal.toml", "focus_factor": 1.0},
        ],
        "tasks": [
            {"id": "T1", "name": "Design", "estimate": 2},
            {"id": "T2", "name": "Build", "estimate": 3.5, "after": "T1"},
            {"id": "T3", "name": "Ship", "estimate": 1, "after": ["T1", "T2"]},
        ],
        "assignments": [
            {"task": "T1", "owner": "Alice"},
            {"task": "T2", "owner": "Bob", "focus_factor": 0.5},
            {"task": "T3", "owner": "Alice"},
        ],
        "time_markers": [{"label": "Demo", "time": "2024-01-19"}],
    }
