# cronos/availability.py

"""
Effective working schedule for a calendar day.

A date-specific exception replaces the weekly template entirely for that
date. Without one, the weekday's entry of the weekly template applies.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Mapping, Optional

from .errors import ConfigurationError
from .schemas import DayException, DaySchedule, TimeRange, Weekday


def _default_day(**overrides) -> DaySchedule:
    day = {
        "active": True,
        "interval_minutes": 60,
        "morning": {"start": "09:00", "end": "12:00", "active": True},
        "afternoon": {"start": "13:00", "end": "18:00", "active": True},
        "night": {"start": "19:00", "end": "21:00", "active": False},
    }
    day.update(overrides)
    return DaySchedule.model_validate(day)


def default_week() -> dict:
    return {
        Weekday.monday.value: _default_day(),
        Weekday.tuesday.value: _default_day(),
        Weekday.wednesday.value: _default_day(),
        Weekday.thursday.value: _default_day(),
        Weekday.friday.value: _default_day(),
        Weekday.saturday.value: _default_day(
            afternoon={"start": "13:00", "end": "18:00", "active": False}
        ),
        Weekday.sunday.value: _default_day(active=False),
    }


def empty_schedule() -> DaySchedule:
    return _default_day(
        active=False,
        morning={"start": "09:00", "end": "12:00", "active": False},
        afternoon={"start": "13:00", "end": "18:00", "active": False},
    )


def date_key(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def _week_entry(week: Mapping, weekday: Weekday) -> Optional[DaySchedule]:
    # accept both Weekday and plain string keys
    for key, schedule in week.items():
        if getattr(key, "value", key) == weekday.value:
            return schedule
    return None


def find_exception(day: date, exceptions: Iterable[DayException]) -> Optional[DayException]:
    key = date_key(day)
    for exc in exceptions:
        if date_key(exc.date) == key:
            return exc
    return None


def resolve(day: date, week: Mapping, exceptions: Iterable[DayException]) -> DaySchedule:
    """
    Return the schedule in force on `day`.

    Raises:
        ConfigurationError: the weekly template has no entry for the weekday
    """
    exc = find_exception(day, exceptions)
    if exc is not None:
        return exc.schedule

    weekday = Weekday.for_date(day)
    schedule = _week_entry(week, weekday)
    if schedule is None:
        raise ConfigurationError(f"Weekly availability has no entry for '{weekday.value}'")
    return schedule


def exception_seed(day: date, week: Mapping, exceptions: Iterable[DayException]) -> DaySchedule:
    """Schedule used to pre-fill a new exception form for `day`."""
    exc = find_exception(day, exceptions)
    if exc is not None:
        return exc.schedule.model_copy(deep=True)
    schedule = _week_entry(week, Weekday.for_date(day))
    if schedule is None:
        return empty_schedule()
    return schedule.model_copy(deep=True)


def active_windows(schedule: DaySchedule) -> List[TimeRange]:
    if not schedule.active:
        return []
    return [r for r in (schedule.morning, schedule.afternoon, schedule.night) if r.active]


def _parse_hhmm(value: str) -> datetime:
    return datetime.strptime(value, "%H:%M")


def slot_starts(schedule: DaySchedule) -> List[str]:
    """
    Start times ("HH:MM") on the schedule's interval grid.

    A slot is offered only when it fits entirely inside an active window.
    """
    step = timedelta(minutes=schedule.interval_minutes)
    starts = []
    for window in active_windows(schedule):
        current = _parse_hhmm(window.start)
        window_end = _parse_hhmm(window.end)
        while current + step <= window_end:
            starts.append(current.strftime("%H:%M"))
            current += step
    return starts


def validate_schedule(schedule: DaySchedule) -> List[str]:
    """Human-readable problems with a schedule's active windows."""
    problems = []
    for name in ("morning", "afternoon", "night"):
        window = getattr(schedule, name)
        if window.active and _parse_hhmm(window.start) >= _parse_hhmm(window.end):
            problems.append(f"{name}: start must be before end")
    return problems
