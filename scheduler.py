#!/usr/bin/env python3
"""
Task Scheduler - Calendar-driven scheduling of dependent tasks across team members

Each task starts when its latest parent ends and burns its estimate down day
by day against the assignee's calendar and focus factor. Offsets are kept as
fractional days since project start so that a task finishing mid-day hands
the rest of that day to its successors.
"""

import logging
import math
from collections import deque
from datetime import date, timedelta
from typing import Dict, List, Mapping, Tuple

from calendar_index import BusinessCalendar, DayInfo, DayKind, classify
from dependency_graph import DependencyGraph
from planner_errors import TaskNotAssigned, UnknownCalendar, UnknownWorker
from project_config import Assignment, ProjectConfig, Task, TeamMember
from resource_ledger import NOMINAL_DAY_HOURS, ResourceLedger, WorkerDay
from schedule_result import ScheduledTask, ScheduleResult

# below this a leftover day fraction is treated as a whole day
PARTIAL_DAY_EPSILON = 0.001
BURN_EPSILON = 1e-10

_PAUSE_LEDGER_KIND = {
    DayKind.NON_WORKING: WorkerDay.PUB_HOLIDAYS,
    DayKind.PUBLIC_HOLIDAY: WorkerDay.PUB_HOLIDAYS,
    DayKind.WORKER_HOLIDAY: WorkerDay.HOLIDAYS,
    DayKind.WORKER_OTHER_DUTY: WorkerDay.OTHER_DUTIES,
}


class ScheduleProcessor:
    """Schedules every task of a project and accounts worker load per day"""

    def __init__(self, project: ProjectConfig, calendars: Mapping[str, BusinessCalendar]):
        self.project = project
        self.calendars = calendars
        self.team: Dict[str, TeamMember] = {m.name: m for m in project.team}
        self.assignments: Dict[str, Assignment] = {}
        for assignment in project.assignments:
            if assignment.task in self.assignments:
                logging.warning(
                    f"Task '{assignment.task}' has more than one assignment, "
                    f"keeping {self.assignments[assignment.task].owner}"
                )
                continue
            self.assignments[assignment.task] = assignment
        self._reset()

    def _reset(self) -> None:
        self.project_begin = self.project.start_date
        self.project_end = self.project.start_date
        self.tasks: List[ScheduledTask] = []
        self.workers_absence: Dict[str, List[date]] = {}
        self.public_holidays: List[date] = []
        self.ledger = ResourceLedger()

    def run(self) -> ScheduleResult:
        """
        Schedule all tasks and assemble the result; any error aborts the whole run

        Each call starts from a fresh ledger, so a processor can be run again.
        """
        self._reset()
        graph = DependencyGraph.build(self.project.tasks)
        queue = deque(graph.starting_points)

        while queue:
            node_id = queue.popleft()
            node = graph.nodes[node_id]
            if node.resolved:
                continue

            start_offset = graph.start_offset(node_id)
            if start_offset is None:
                # a parent is not scheduled yet, retry later
                queue.append(node_id)
                logging.debug(f"Deferring task '{graph.task(node_id).id}'")
                continue

            # front of the queue: follow this chain as far as possible
            for child_id in node.children:
                queue.appendleft(child_id)

            scheduled = self._schedule_task(graph.task(node_id), start_offset)
            self.tasks.append(scheduled)
            if scheduled.end_on > self.project_end:
                self.project_end = scheduled.end_on
            graph.set_offset(node_id, scheduled.end_offset)

        self._check_calendar_coverage()
        self.ledger.finalize(self.project_begin, self.project_end)

        closed_days: List[int] = []
        for member in self.project.team:
            calendar = self.calendars.get(member.base_calendar)
            if calendar is not None and member.name in self.ledger.workers():
                closed_days.extend(calendar.closed_days)

        return ScheduleResult.assemble(
            title=self.project.project_name,
            tasks=self.tasks,
            project_starts=self.project_begin,
            project_ends=self.project_end,
            closed_days=closed_days,
            workers_absence=self.workers_absence,
            public_holidays=self.public_holidays,
            resource_allocation=self.ledger,
            time_markers=self.project.time_markers,
        )

    def _resolve_assignee(self, task: Task) -> Tuple[TeamMember, BusinessCalendar, float]:
        assignment = self.assignments.get(task.id)
        if assignment is None:
            raise TaskNotAssigned(task.id, task.name)
        worker = self.team.get(assignment.owner)
        if worker is None:
            raise UnknownWorker(task.id, assignment.owner)
        calendar = self.calendars.get(worker.base_calendar)
        if calendar is None:
            raise UnknownCalendar(worker.name, worker.base_calendar)
        focus_factor = (
            assignment.focus_factor if assignment.focus_factor is not None else worker.focus_factor
        )
        return worker, calendar, focus_factor

    def _schedule_task(self, task: Task, start_offset: float) -> ScheduledTask:
        worker, calendar, focus_factor = self._resolve_assignee(task)
        start_on = self.project_begin + timedelta(days=math.floor(start_offset))

        cumulative_days = start_offset
        hours_to_burn = task.estimate * NOMINAL_DAY_HOURS
        pause_days: List[date] = []
        day = start_on

        while True:
            day_info = classify(day, calendar, worker)
            if not day_info.is_working:
                self._record_pause(worker.name, day, day_info, pause_days)
                cumulative_days += 1.0
                day += timedelta(days=1)
                continue

            effective_hours = day_info.hours * focus_factor
            day_len = 1.0
            left_day = cumulative_days % 1.0
            if left_day > PARTIAL_DAY_EPSILON:
                # a previous task already used part of this day
                remaining_fraction = 1.0 - left_day
                effective_hours *= remaining_fraction
                day_len *= remaining_fraction

            if hours_to_burn >= effective_hours:
                hours_to_burn -= effective_hours
                cumulative_days += day_len
                self.ledger.add(worker.name, day, WorkerDay.FINE, NOMINAL_DAY_HOURS * day_len)
                task_ends = abs(hours_to_burn) < BURN_EPSILON
            else:
                fraction = hours_to_burn / effective_hours
                cumulative_days += day_len * fraction
                self.ledger.add(
                    worker.name, day, WorkerDay.UNDERLOADED, NOMINAL_DAY_HOURS * fraction * day_len
                )
                task_ends = True

            if task_ends:
                break
            day += timedelta(days=1)

        end_on = self.project_begin + timedelta(days=math.ceil(cumulative_days) - 1)
        end_on = max(end_on, start_on)
        logging.debug(
            f"Scheduled '{task.id}' for {worker.name}: {start_on} -> {end_on} "
            f"(offset {start_offset:.3f} -> {cumulative_days:.3f})"
        )

        return ScheduledTask(
            id=task.id,
            name=task.name,
            assignee=worker.name,
            after=tuple(task.after),
            start_on=start_on,
            end_on=end_on,
            pause_days=tuple(pause_days),
            duration_hours=24 * task.estimate,
            start_offset=start_offset,
            end_offset=cumulative_days,
        )

    def _record_pause(
        self, worker_name: str, day: date, day_info: DayInfo, pause_days: List[date]
    ) -> None:
        pause_days.append(day)
        self.ledger.add(worker_name, day, _PAUSE_LEDGER_KIND[day_info.kind], 0.0)
        if day_info.kind is DayKind.NON_WORKING:
            return
        absences = self.workers_absence.setdefault(worker_name, [])
        if day not in absences:
            absences.append(day)
        if day_info.kind is DayKind.PUBLIC_HOLIDAY and day not in self.public_holidays:
            self.public_holidays.append(day)

    def _check_calendar_coverage(self) -> None:
        years = range(self.project_begin.year, self.project_end.year + 1)
        for name in self.project.calendar_names():
            calendar = self.calendars.get(name)
            if calendar is None:
                continue
            for year in years:
                if not calendar.year_covered(year):
                    logging.warning(f"Calendar '{name}' has no public holidays defined for {year}")


def process(project: ProjectConfig, calendars: Mapping[str, BusinessCalendar]) -> ScheduleResult:
    """Schedule a project; shortcut for ScheduleProcessor(project, calendars).run()"""
    return ScheduleProcessor(project, calendars).run()
