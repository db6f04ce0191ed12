"""Lookups shared by the engine operations."""
from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from progressive.models.database_models import Program, ProgramDay
from progressive.models.plans import DAY_WORKOUT, STATUS_PLANNED, LadderState, SubmaxState, dump
from progressive.services.exceptions import NotFoundError, StateConflictError
from progressive.services.plan_synthesizer import plan_for_state


def get_owned_program(db: Session, owner_id: int, program_id: str, *, for_update: bool = False) -> Program:
    """Return the caller's program or raise NotFoundError."""
    query = db.query(Program).filter(Program.id == program_id, Program.owner_id == owner_id)
    if for_update:
        query = query.populate_existing().with_for_update()
    program = query.first()
    if program is None:
        raise NotFoundError(f"Program {program_id} not found")
    return program


def get_owned_day(db: Session, owner_id: int, day_id: str, *, for_update: bool = False) -> ProgramDay:
    """Return a day belonging to one of the caller's programs or raise NotFoundError."""
    query = (
        db.query(ProgramDay)
        .join(Program, ProgramDay.program_id == Program.id)
        .filter(ProgramDay.id == day_id, Program.owner_id == owner_id)
    )
    if for_update:
        query = query.populate_existing().with_for_update(of=ProgramDay)
    day = query.first()
    if day is None:
        raise NotFoundError(f"Program day {day_id} not found")
    return day


def lock_day_and_program(db: Session, owner_id: int, day_id: str) -> tuple[ProgramDay, Program]:
    """Re-read a day and its program with row locks, discarding cached copies."""
    day = get_owned_day(db, owner_id, day_id, for_update=True)
    program = get_owned_program(db, owner_id, day.program_id, for_update=True)
    return day, program


def ensure_planned(day: ProgramDay, expected_type: str | None = None) -> None:
    """Reject days that already left ``planned`` or are the wrong kind of day."""
    if day.status != STATUS_PLANNED:
        raise StateConflictError(f"Program day {day.id} is already {day.status}")
    if expected_type is not None and day.day_type != expected_type:
        raise StateConflictError(
            f"Program day {day.id} is a {day.day_type} day, not a {expected_type} day"
        )


def refresh_next_workout(
    db: Session,
    program: Program,
    after: date,
    state: SubmaxState | LadderState,
) -> ProgramDay | None:
    """
    Rewrite the plan of the nearest planned workout strictly after ``after``.

    Only that single day is touched; later workouts keep their plans.
    """
    next_day = (
        db.query(ProgramDay)
        .filter(
            ProgramDay.program_id == program.id,
            ProgramDay.date > after,
            ProgramDay.day_type == DAY_WORKOUT,
            ProgramDay.status == STATUS_PLANNED,
        )
        .order_by(ProgramDay.date.asc())
        .first()
    )
    if next_day is not None:
        next_day.plan = dump(plan_for_state(program.exercise_key, state))
    return next_day
