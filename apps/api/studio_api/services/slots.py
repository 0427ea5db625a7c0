"""
Slot generation.

Turns an employee's weekday rules into concrete bookable slots for one
business-local day:

  1. reject malformed or past dates (InvalidDate)
  2. a day with blocking time off has no slots
  3. no rules for the weekday means no slots
  4. collect accepted appointments touching the local day
  5. reduce them to hour marks (see OccupancyIndex.occupied_marks)
  6. expand each rule into candidates; keep those starting after now
     whose start is not an occupied mark
  7. return candidates in rule order, chronological within a rule

Occupancy here is deliberately coarse: a slot is dropped only when its
start lands on an occupied hour mark. The ConflictGuard re-checks exact
overlap when a booking is accepted, so a listed slot can still be
refused at that point.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator
from uuid import UUID

from studio_api.models.working_hours import WorkingHoursKind, WorkingHoursRule
from studio_api.services.business_time import BusinessClock
from studio_api.services.occupancy import OccupancyIndex
from studio_api.services.time_off import TimeOffStore
from studio_api.services.working_hours import DEFAULT_INTERVAL_MINUTES, WorkingHoursStore

FIXED_STEP_MINUTES = 60
CUSTOM_DEFAULT_MINUTES = 60


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime


class SlotGenerator:
    def __init__(
        self,
        clock: BusinessClock,
        working_hours: WorkingHoursStore,
        time_off: TimeOffStore,
        occupancy: OccupancyIndex,
    ):
        self.clock = clock
        self.working_hours = working_hours
        self.time_off = time_off
        self.occupancy = occupancy

    def get_availability(self, employee_id: UUID, target_date: str) -> list[Slot]:
        day = self.clock.parse_target_date(target_date)

        if self.time_off.is_day_off(employee_id, day):
            return []

        rules = self.working_hours.rules_for(employee_id, self.clock.weekday(day))
        if not rules:
            return []

        day_start, day_end = self.clock.day_bounds(day)
        taken = self.occupancy.occupied_marks(
            self.occupancy.accepted_between(employee_id, day_start, day_end)
        )
        now = self.clock.now_utc()

        slots: list[Slot] = []
        for rule in rules:
            for start, end in self.candidates(day, rule):
                if start <= now or int(start.timestamp()) in taken:
                    continue
                slots.append(Slot(start=start, end=end))
        return slots

    def candidates(self, day: date, rule: WorkingHoursRule) -> Iterator[tuple[datetime, datetime]]:
        if rule.kind == WorkingHoursKind.custom:
            for interval in rule.intervals or []:
                start = self.clock.at(day, interval["start_time"])
                if interval.get("end_time"):
                    end = self.clock.at(day, interval["end_time"])
                else:
                    end = start + timedelta(minutes=CUSTOM_DEFAULT_MINUTES)
                yield start, end
            return

        if rule.kind == WorkingHoursKind.fixed:
            step = timedelta(minutes=FIXED_STEP_MINUTES)
        else:
            step = timedelta(minutes=rule.interval_minutes or DEFAULT_INTERVAL_MINUTES)

        cursor = self.clock.at(day, rule.start_time)
        window_end = self.clock.at(day, rule.end_time)
        # a trailing partial slot is dropped, never truncated
        while cursor + step <= window_end:
            yield cursor, cursor + step
            cursor += step
