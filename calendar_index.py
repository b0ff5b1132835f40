#!/usr/bin/env python3
"""
Calendar Index - Business calendars and per-worker day classification

A day is classified against the worker's base calendar first (closed weekdays,
public holidays) and only then against the worker's own absence overlays.
"""

import logging
import tomllib
from datetime import date, datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Sequence, Set, Union

from planner_errors import ConfigError

DATE_FMT = "%Y-%m-%d"

WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


class DateSpan:
    """A single date or an inclusive date range"""

    def __init__(self, start: date, end: Optional[date] = None):
        end = start if end is None else end
        if end < start:
            raise ConfigError(f"Date range ends before it starts: {start}:{end}")
        self.start = start
        self.end = end

    @property
    def is_range(self) -> bool:
        return self.start != self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def __eq__(self, other):
        if not isinstance(other, DateSpan):
            return NotImplemented
        return (self.start, self.end) == (other.start, other.end)

    def __hash__(self):
        return hash((self.start, self.end))

    def __repr__(self):
        if self.is_range:
            return f"DateSpan({self.start}:{self.end})"
        return f"DateSpan({self.start})"


def parse_date(value: Union[str, date]) -> date:
    """Parse a YYYY-MM-DD string (TOML dates are passed through)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FMT).date()
    except ValueError as e:
        raise ConfigError(f"Invalid date '{value}', expected YYYY-MM-DD") from e


def parse_date_spans(value: Any) -> List[DateSpan]:
    """
    Parse a multi-date entry into DateSpan objects

    Accepts a TOML date, a "YYYY-MM-DD" or "YYYY-MM-DD:YYYY-MM-DD" string,
    a comma separated string of those, or a list mixing any of them.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        spans: List[DateSpan] = []
        for item in value:
            spans.extend(parse_date_spans(item))
        return spans
    if isinstance(value, date):
        return [DateSpan(parse_date(value))]

    spans = []
    for part in str(value).split(","):
        part = part.strip()
        if not part:
            continue
        if ":" in part:
            first, last = part.split(":", 1)
            spans.append(DateSpan(parse_date(first), parse_date(last)))
        else:
            spans.append(DateSpan(parse_date(part)))
    return spans


def in_date_spans(day: date, spans: Sequence[DateSpan]) -> bool:
    return any(span.contains(day) for span in spans)


def parse_weekday(name: Union[str, int]) -> int:
    """Map a weekday name (full or 3-letter, any case) to date.weekday() numbering"""
    if isinstance(name, int):
        if 0 <= name <= 6:
            return name
        raise ConfigError(f"Invalid weekday number: {name}")
    key = str(name).strip().lower()
    for idx, full in enumerate(WEEKDAY_NAMES):
        if key == full or key == full[:3]:
            return idx
    raise ConfigError(f"Invalid weekday name: '{name}'")


class PublicHoliday:
    """A named public holiday spanning one or more dates"""

    def __init__(self, name: str, dates: List[DateSpan]):
        self.name = name
        self.dates = dates

    def __repr__(self):
        return f"PublicHoliday({self.name}, {self.dates})"


class BusinessCalendar:
    """Closed weekdays, public holidays and nominal working hours of a base calendar"""

    def __init__(
        self,
        closed_days: Set[int],
        working_hours: float = 8,
        public_holidays: Optional[List[PublicHoliday]] = None,
        name: str = "",
    ):
        if working_hours <= 0:
            raise ConfigError(f"Working hours per day must be positive, got {working_hours}")
        if len(set(closed_days)) >= 7:
            raise ConfigError(f"Calendar '{name}' closes every day of the week")
        self.name = name
        self.closed_days = set(closed_days)
        self.working_hours = working_hours
        self.public_holidays = public_holidays or []

    def holiday_spans(self) -> Iterator[DateSpan]:
        for holiday in self.public_holidays:
            yield from holiday.dates

    def is_public_holiday(self, day: date) -> bool:
        return in_date_spans(day, list(self.holiday_spans()))

    def year_covered(self, year: int) -> bool:
        """True if any public holiday definition falls into (or spans) the given year"""
        return any(span.start.year <= year <= span.end.year for span in self.holiday_spans())

    def __repr__(self):
        return (
            f"BusinessCalendar({self.name or '?'}, closed={sorted(self.closed_days)}, "
            f"{self.working_hours}h, {len(self.public_holidays)} holidays)"
        )


class DayKind(Enum):
    NON_WORKING = "non_working"
    PUBLIC_HOLIDAY = "public_holiday"
    WORKER_HOLIDAY = "worker_holiday"
    WORKER_OTHER_DUTY = "worker_other_duty"
    WORKING = "working"


class DayInfo(NamedTuple):
    kind: DayKind
    hours: float = 0.0

    @property
    def is_working(self) -> bool:
        return self.kind is DayKind.WORKING


def classify(day: date, calendar: BusinessCalendar, worker=None) -> DayInfo:
    """
    Classify a calendar date for a worker

    Base calendar rules (closed weekday, public holiday) always win over the
    worker's personal holidays and other duties.

    Args:
        day: Date to classify
        calendar: The worker's base calendar
        worker: Object with ``holidays`` and ``other_duties`` DateSpan lists, or None

    Returns:
        DayInfo with the day kind and, for working days, the nominal hours
    """
    if day.weekday() in calendar.closed_days:
        return DayInfo(DayKind.NON_WORKING)
    if calendar.is_public_holiday(day):
        return DayInfo(DayKind.PUBLIC_HOLIDAY)
    if worker is not None:
        if in_date_spans(day, worker.holidays):
            return DayInfo(DayKind.WORKER_HOLIDAY)
        if in_date_spans(day, worker.other_duties):
            return DayInfo(DayKind.WORKER_OTHER_DUTY)
    return DayInfo(DayKind.WORKING, float(calendar.working_hours))


def parse_calendar(data: Dict[str, Any], name: str = "") -> BusinessCalendar:
    """Build a BusinessCalendar from a parsed TOML document"""
    try:
        closed = {parse_weekday(d) for d in data.get("closed_days", [])}
        hours = float(data.get("working_hrs_in_day", 8))
        holidays = [
            PublicHoliday(entry.get("name", ""), parse_date_spans(entry["date"]))
            for entry in data.get("public_holidays", [])
        ]
    except ConfigError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Malformed calendar '{name}': {e}") from e

    calendar = BusinessCalendar(closed, hours, holidays, name=name)
    logging.debug(f"Loaded calendar: {calendar}")
    return calendar


def load_calendar(path: Union[str, Path], name: Optional[str] = None) -> BusinessCalendar:
    """Load a BusinessCalendar from a TOML file"""
    path = Path(path)
    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in calendar file {path}: {e}") from e
    return parse_calendar(data, name=name or path.name)
