"""
Recurring appointment series.

Occurrences are laid out on business-local calendar days and each day's
wall-clock times are converted to UTC separately, so a weekly 10:00
booking stays at 10:00 across a DST change.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

import pendulum

from studio_api.core.errors import ValidationError
from studio_api.services.business_time import BusinessClock, is_hhmm, parse_hhmm

FREQUENCIES = ("daily", "weekly", "monthly")
MAX_OCCURRENCES = 366


@dataclass(frozen=True)
class Occurrence:
    start: datetime
    end: datetime


def _validate(
    frequency: str,
    start_date: date,
    start_time: str,
    end_time: str,
    interval: int,
    count: Optional[int],
    end_date: Optional[date],
    weekdays: Sequence[int],
) -> None:
    if frequency not in FREQUENCIES:
        raise ValidationError("frequency must be one of: daily, weekly, monthly")
    if interval < 1:
        raise ValidationError("interval must be at least 1")
    if count is None and end_date is None:
        raise ValidationError("A series needs a count or an endDate")
    if count is not None and not 1 <= count <= MAX_OCCURRENCES:
        raise ValidationError(f"count must be between 1 and {MAX_OCCURRENCES}")
    if end_date is not None and end_date < start_date:
        raise ValidationError("endDate must not be before startDate")
    if not is_hhmm(start_time) or not is_hhmm(end_time):
        raise ValidationError("startTime and endTime must be HH:MM")
    if parse_hhmm(end_time) <= parse_hhmm(start_time):
        raise ValidationError("endTime must be after startTime")
    if any(not 0 <= w <= 6 for w in weekdays):
        raise ValidationError("byWeekday entries must be between 0 (Sunday) and 6 (Saturday)")


def generate_occurrences(
    clock: BusinessClock,
    start_date: date,
    frequency: str,
    start_time: str,
    end_time: str,
    interval: int = 1,
    count: Optional[int] = None,
    end_date: Optional[date] = None,
    by_weekday: Optional[Sequence[int]] = None,
) -> list[Occurrence]:
    """
    Expand a recurrence into concrete occurrences, in chronological order.

    daily and monthly step from start_date by `interval` days or months
    (months are always counted from start_date, so the 31st clamps to the
    end of shorter months without drifting). weekly steps by `interval`
    Sunday-based weeks and emits each listed weekday on or after
    start_date; without by_weekday it repeats start_date's weekday.
    Generation stops after `count` occurrences or past end_date, and never
    yields more than MAX_OCCURRENCES.
    """
    weekdays = sorted(set(by_weekday or []))
    _validate(frequency, start_date, start_time, end_time, interval, count, end_date, weekdays)

    first = pendulum.date(start_date.year, start_date.month, start_date.day)
    if frequency == "weekly" and not weekdays:
        weekdays = [clock.weekday(first)]
    week_start = first.subtract(days=clock.weekday(first))
    limit = count or MAX_OCCURRENCES

    occurrences: list[Occurrence] = []
    step = 0
    while len(occurrences) < limit:
        if frequency == "daily":
            days = [first.add(days=step * interval)]
        elif frequency == "monthly":
            days = [first.add(months=step * interval)]
        else:
            week = week_start.add(weeks=step * interval)
            days = [week.add(days=w) for w in weekdays]
        step += 1

        if end_date is not None and days[0] > end_date:
            break
        for day in days:
            if day < first:
                continue
            if end_date is not None and day > end_date:
                break
            occurrences.append(Occurrence(start=clock.at(day, start_time), end=clock.at(day, end_time)))
            if len(occurrences) >= limit:
                break
    return occurrences
