#!/usr/bin/env python3
"""
Resource Ledger - Per-worker, per-day committed hours and workload classification
"""

import logging
from datetime import date, timedelta
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple

NOMINAL_DAY_HOURS = 8.0
LOAD_EPSILON = 0.001


class WorkerDay(Enum):
    PUB_HOLIDAYS = "PubHolidays"
    HOLIDAYS = "Holidays"
    OTHER_DUTIES = "OtherDuties"
    OVERLOADED = "Overloaded"
    UNDERLOADED = "Underloaded"
    FINE = "Fine"
    UNASSIGNED = "Unassigned"

    @property
    def is_absence(self) -> bool:
        return self in ABSENCE_DAYS


ABSENCE_DAYS = {WorkerDay.PUB_HOLIDAYS, WorkerDay.HOLIDAYS, WorkerDay.OTHER_DUTIES}


class LedgerEntry(NamedTuple):
    hours: float
    kind: WorkerDay

    def as_tuple(self) -> Tuple[float, WorkerDay]:
        return self.hours, self.kind

    def __repr__(self):
        return f"LedgerEntry({self.hours:.3f}h, {self.kind.value})"


def classify_hours(hours: float) -> WorkerDay:
    """Derive the workload class of a non-absence day from its committed hours"""
    if hours <= LOAD_EPSILON:
        return WorkerDay.UNASSIGNED
    if hours < NOMINAL_DAY_HOURS - LOAD_EPSILON:
        return WorkerDay.UNDERLOADED
    if hours <= NOMINAL_DAY_HOURS + LOAD_EPSILON:
        return WorkerDay.FINE
    return WorkerDay.OVERLOADED


class ResourceLedger:
    """
    Accumulates hours committed per (worker, day) across all scheduled tasks.

    Hours for the same worker and day are summed, so double-booking stays
    visible and turns into Overloaded once the ledger is finalized.
    """

    def __init__(self):
        self._entries: Dict[str, Dict[date, LedgerEntry]] = {}
        self.finalized = False

    def add(self, worker: str, day: date, kind: WorkerDay, hours: float = 0.0) -> None:
        if self.finalized:
            raise RuntimeError("Cannot add to a finalized resource ledger")
        days = self._entries.setdefault(worker, {})
        entry = days.get(day)
        if entry is None:
            days[day] = LedgerEntry(hours, kind)
            return
        kind = entry.kind if entry.kind.is_absence else kind
        days[day] = LedgerEntry(entry.hours + hours, kind)

    def finalize(self, project_start: date, project_end: date) -> None:
        """
        Fill gaps with Unassigned days and reclassify entries by committed hours

        Every worker with at least one entry gets exactly one entry for each
        day in [project_start, project_end]. Absence entries keep their tag.
        """
        if self.finalized:
            raise RuntimeError("Resource ledger is already finalized")

        for worker, days in self._entries.items():
            current = project_start
            while current <= project_end:
                days.setdefault(current, LedgerEntry(0.0, WorkerDay.UNASSIGNED))
                current += timedelta(days=1)

            for day, entry in list(days.items()):
                if entry.kind.is_absence:
                    continue
                kind = classify_hours(entry.hours)
                days[day] = entry._replace(kind=kind)
                if kind is WorkerDay.OVERLOADED:
                    logging.warning(f"Overloaded: {worker} on {day} ({entry.hours:.2f}h)")

        self.finalized = True

    def workers(self) -> List[str]:
        return sorted(self._entries)

    def days(self, worker: str) -> List[date]:
        return sorted(self._entries.get(worker, {}))

    def get(self, worker: str, day: date) -> Optional[LedgerEntry]:
        return self._entries.get(worker, {}).get(day)

    def hours(self, worker: str, day: date) -> float:
        entry = self.get(worker, day)
        return entry.hours if entry else 0.0

    def entries(self, worker: str) -> List[Tuple[date, LedgerEntry]]:
        """Entries of a worker sorted by date"""
        days = self._entries.get(worker, {})
        return [(d, days[d]) for d in sorted(days)]

    def as_dict(self) -> Dict[str, Dict[date, Tuple[float, WorkerDay]]]:
        """worker -> date -> (hours, kind), sorted by worker then date"""
        return {
            worker: {d: entry.as_tuple() for d, entry in self.entries(worker)}
            for worker in self.workers()
        }

    def __len__(self):
        return sum(len(days) for days in self._entries.values())

    def __repr__(self):
        state = "finalized" if self.finalized else "open"
        return f"ResourceLedger({len(self._entries)} workers, {len(self)} entries, {state})"
