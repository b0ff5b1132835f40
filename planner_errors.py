#!/usr/bin/env python3
"""
Planner Errors - Fatal error types raised while loading or scheduling a project
"""

from typing import List


class PlannerError(Exception):
    """Base class for all planner errors. None of them are retried."""


class ConfigError(PlannerError, ValueError):
    """Input file or definition is malformed"""


class DuplicateTask(PlannerError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task id '{task_id}' is defined more than once")


class UnknownDependency(PlannerError):
    def __init__(self, task_id: str, dependency_id: str):
        self.task_id = task_id
        self.dependency_id = dependency_id
        super().__init__(f"Task '{task_id}' depends on unknown task '{dependency_id}'")


class CyclicDependency(PlannerError):
    def __init__(self, cycle: List[str]):
        self.cycle = list(cycle)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.cycle)}")


class TaskNotAssigned(PlannerError):
    def __init__(self, task_id: str, task_name: str):
        self.task_id = task_id
        self.task_name = task_name
        super().__init__(f"Task '{task_name}' ({task_id}) is not assigned")


class UnknownWorker(PlannerError):
    def __init__(self, task_id: str, worker: str):
        self.task_id = task_id
        self.worker = worker
        super().__init__(f"Worker '{worker}' assigned to task '{task_id}' is not defined")


class UnknownCalendar(PlannerError):
    def __init__(self, worker: str, calendar: str):
        self.worker = worker
        self.calendar = calendar
        super().__init__(f"Calendar '{calendar}' used by worker '{worker}' is not available")
