import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studio_api.core.errors import ValidationError
from studio_api.models.working_hours import WorkingHoursKind, WorkingHoursRule
from studio_api.schemas.working_hours import WorkingHoursRuleIn
from studio_api.services.business_time import is_hhmm, parse_hhmm

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MINUTES = 60


def _minutes(hhmm: str) -> int:
    hour, minute = parse_hhmm(hhmm)
    return hour * 60 + minute


def validate_rule(rule: WorkingHoursRuleIn) -> WorkingHoursKind:
    try:
        kind = WorkingHoursKind(rule.type)
    except ValueError:
        raise ValidationError("type must be one of: fixed, interval, custom")

    if kind == WorkingHoursKind.custom:
        if not rule.intervals:
            raise ValidationError("custom working hours need at least one interval")
        for interval in rule.intervals:
            if not is_hhmm(interval.start_time):
                raise ValidationError(f"Invalid interval startTime: {interval.start_time!r}")
            if interval.end_time is None:
                continue
            if not is_hhmm(interval.end_time):
                raise ValidationError(f"Invalid interval endTime: {interval.end_time!r}")
            if _minutes(interval.end_time) <= _minutes(interval.start_time):
                raise ValidationError("interval endTime must be after startTime")
        return kind

    if not rule.start_time or not rule.end_time:
        raise ValidationError("startTime and endTime are required")
    if not is_hhmm(rule.start_time) or not is_hhmm(rule.end_time):
        raise ValidationError("startTime and endTime must be HH:MM")
    # equal start/end is allowed and means "no work that day"
    if _minutes(rule.end_time) < _minutes(rule.start_time):
        raise ValidationError("endTime must not be before startTime")
    if kind == WorkingHoursKind.interval and rule.interval_length is not None and rule.interval_length <= 0:
        raise ValidationError("intervalLength must be a positive number of minutes")
    return kind


def _to_row(employee_id: UUID, weekday: int, position: int, kind: WorkingHoursKind, rule: WorkingHoursRuleIn) -> WorkingHoursRule:
    if kind == WorkingHoursKind.custom:
        return WorkingHoursRule(
            employee_id=employee_id,
            weekday=weekday,
            kind=kind,
            intervals=[{"start_time": i.start_time, "end_time": i.end_time} for i in rule.intervals],
            position=position,
        )
    return WorkingHoursRule(
        employee_id=employee_id,
        weekday=weekday,
        kind=kind,
        start_time=rule.start_time,
        end_time=rule.end_time,
        interval_minutes=(rule.interval_length or DEFAULT_INTERVAL_MINUTES) if kind == WorkingHoursKind.interval else None,
        position=position,
    )


class WorkingHoursStore:
    def __init__(self, db: Session):
        self.db = db

    def rules_for(self, employee_id: UUID, weekday: int) -> list[WorkingHoursRule]:
        return list(
            self.db.execute(
                select(WorkingHoursRule)
                .where(WorkingHoursRule.employee_id == employee_id, WorkingHoursRule.weekday == weekday)
                .order_by(WorkingHoursRule.position)
            ).scalars()
        )

    def all_for(self, employee_id: UUID) -> list[WorkingHoursRule]:
        return list(
            self.db.execute(
                select(WorkingHoursRule)
                .where(WorkingHoursRule.employee_id == employee_id)
                .order_by(WorkingHoursRule.weekday, WorkingHoursRule.position)
            ).scalars()
        )

    def replace(self, employee_id: UUID, weekday: int, rules: Sequence[WorkingHoursRuleIn]) -> list[WorkingHoursRule]:
        """
        Replace every rule of (employee, weekday) with `rules`.

        Validation runs before anything is touched, and the delete and the
        inserts share one commit, so a failure leaves the old rules as they were.
        """
        if not isinstance(weekday, int) or not 0 <= weekday <= 6:
            raise ValidationError("weekday must be between 0 (Sunday) and 6 (Saturday)")
        kinds = [validate_rule(r) for r in rules]

        rows = [_to_row(employee_id, weekday, i, kind, r) for i, (kind, r) in enumerate(zip(kinds, rules))]
        try:
            self.db.execute(
                delete(WorkingHoursRule).where(
                    WorkingHoursRule.employee_id == employee_id,
                    WorkingHoursRule.weekday == weekday,
                )
            )
            self.db.add_all(rows)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to replace working hours for employee %s weekday %s", employee_id, weekday)
            raise

        logger.info("Working hours replaced for employee %s weekday %s (%d rules)", employee_id, weekday, len(rows))
        return rows
