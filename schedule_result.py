#!/usr/bin/env python3
"""
Schedule Result - Immutable output of a scheduling run, consumed by rendering backends
"""

from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from calendar_index import WEEKDAY_NAMES
from project_config import TimeMarker
from resource_ledger import ResourceLedger


@dataclass(frozen=True)
class ScheduledTask:
    id: str
    name: str
    assignee: str
    after: Tuple[str, ...]
    start_on: date
    end_on: date
    pause_days: Tuple[date, ...]
    duration_hours: float
    start_offset: float
    end_offset: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "assignee": self.assignee,
            "after": list(self.after),
            "start_on": self.start_on.isoformat(),
            "end_on": self.end_on.isoformat(),
            "pause_days": [d.isoformat() for d in self.pause_days],
            "duration_hours": self.duration_hours,
            "start_offset": round(self.start_offset, 6),
            "end_offset": round(self.end_offset, 6),
        }


@dataclass(frozen=True)
class ScheduleResult:
    title: str
    tasks: Tuple[ScheduledTask, ...]
    project_starts: date
    project_ends: date
    closed_days: Tuple[int, ...]
    workers_absence: Mapping[str, Tuple[date, ...]]
    public_holidays: Tuple[date, ...]
    resource_allocation: ResourceLedger
    time_markers: Tuple[TimeMarker, ...]

    @classmethod
    def assemble(
        cls,
        title: str,
        tasks: List[ScheduledTask],
        project_starts: date,
        project_ends: date,
        closed_days: List[int],
        workers_absence: Dict[str, List[date]],
        public_holidays: List[date],
        resource_allocation: ResourceLedger,
        time_markers: List[TimeMarker],
    ) -> "ScheduleResult":
        if not resource_allocation.finalized:
            raise RuntimeError("Resource ledger must be finalized before assembling a result")
        return cls(
            title=title,
            tasks=tuple(tasks),
            project_starts=project_starts,
            project_ends=project_ends,
            closed_days=tuple(sorted(set(closed_days))),
            workers_absence=MappingProxyType(
                {worker: tuple(days) for worker, days in workers_absence.items()}
            ),
            public_holidays=tuple(public_holidays),
            resource_allocation=resource_allocation,
            time_markers=tuple(time_markers),
        )

    @property
    def closed_day_names(self) -> List[str]:
        return [WEEKDAY_NAMES[d] for d in self.closed_days]

    def task(self, task_id: str) -> Optional[ScheduledTask]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def to_dict(self) -> Dict[str, Any]:
        """JSON serializable representation with ISO dates"""
        ledger = {
            worker: {
                d.isoformat(): {"hours": round(hours, 6), "kind": kind.value}
                for d, (hours, kind) in days.items()
            }
            for worker, days in self.resource_allocation.as_dict().items()
        }
        return {
            "title": self.title,
            "project_starts": self.project_starts.isoformat(),
            "project_ends": self.project_ends.isoformat(),
            "closed_days": self.closed_day_names,
            "tasks": [t.to_dict() for t in self.tasks],
            "workers_absence": {
                worker: [d.isoformat() for d in days]
                for worker, days in self.workers_absence.items()
            },
            "public_holidays": [d.isoformat() for d in self.public_holidays],
            "resource_allocation": ledger,
            "time_markers": [
                {
                    "label": tm.label,
                    "time": [
                        f"{span.start.isoformat()}:{span.end.isoformat()}"
                        if span.is_range
                        else span.start.isoformat()
                        for span in tm.time
                    ],
                }
                for tm in self.time_markers
            ],
        }
