"""Rolling-window generation of program days."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import Session

from progressive.models.database_models import Program, ProgramDay
from progressive.models.plans import (
    DAY_REST,
    DAY_TEST,
    DAY_WORKOUT,
    STATUS_PLANNED,
    WEEKDAYS,
    LadderState,
    Schedule,
    SubmaxState,
    dump,
)
from progressive.services.plan_synthesizer import max_test_plan, plan_for_state


logger = logging.getLogger(__name__)

WINDOW_DAYS = 28


@dataclass(frozen=True)
class DaySpec:
    """A day to be scheduled, before it is persisted."""

    date: date
    day_type: str
    plan: dict | None


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def weekday_name(day: date) -> str:
    """Short English weekday name of a calendar date (Mon..Sun)."""
    return WEEKDAYS[day.weekday()]


def max_test_offset(test_every_weeks: int) -> int:
    """Offset from the window start at which the max-test falls."""
    return max(0, test_every_weeks * 7 - 1)


def build_window(
    schedule: Schedule,
    exercise_key: str,
    state: SubmaxState | LadderState,
    start: date,
) -> list[DaySpec]:
    """
    Lay out WINDOW_DAYS consecutive days starting at ``start``.

    Workout plans are synthesised from ``state`` as passed in, never from the
    program's live state, so the same inputs always give the same window.

    Args:
        schedule: Weekly preferred days and test cadence
        exercise_key: Exercise the plans prescribe
        state: Adaptation state to synthesise workout plans from
        start: First calendar date of the window

    Returns:
        list[DaySpec]: One spec per calendar day, in date order
    """
    test_offset = max_test_offset(schedule.test_every_weeks)
    workout_plan = dump(plan_for_state(exercise_key, state))
    test_plan = dump(max_test_plan(exercise_key))

    specs = []
    for offset in range(WINDOW_DAYS):
        current = start + timedelta(days=offset)
        if offset == test_offset:
            specs.append(DaySpec(current, DAY_TEST, dict(test_plan)))
        elif weekday_name(current) in schedule.preferred_days:
            specs.append(DaySpec(current, DAY_WORKOUT, dict(workout_plan)))
        else:
            specs.append(DaySpec(current, DAY_REST, None))
    return specs


def insert_window(db: Session, program: Program, specs: list[DaySpec]) -> int:
    """
    Insert each spec unless the program already has a day on that date.

    Must run inside the caller's transaction. Returns the number of rows added.
    """
    inserted = 0
    for spec in specs:
        exists = (
            db.query(ProgramDay.id)
            .filter(ProgramDay.program_id == program.id, ProgramDay.date == spec.date)
            .first()
        )
        if exists:
            continue
        db.add(
            ProgramDay(
                program_id=program.id,
                date=spec.date,
                day_type=spec.day_type,
                plan=spec.plan,
                status=STATUS_PLANNED,
            )
        )
        inserted += 1
    db.flush()
    return inserted


def generate_window(
    db: Session,
    program: Program,
    schedule: Schedule,
    state: SubmaxState | LadderState,
    start: date,
) -> int:
    """Build and persist a rolling window for ``program`` from ``start``."""
    specs = build_window(schedule, program.exercise_key, state, start)
    inserted = insert_window(db, program, specs)
    logger.info(
        "Generated window for program %s from %s: %d of %d days inserted",
        program.id,
        start.isoformat(),
        inserted,
        len(specs),
    )
    return inserted
