"""Program lifecycle operations: create, read, deactivate, skip."""
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from progressive.config import get_settings
from progressive.database import atomic
from progressive.models.database_models import Program, ProgramDay
from progressive.models.plans import STATUS_SKIPPED, Schedule, dump
from progressive.models.schemas import ProgramCreate
from progressive.services.day_generator import generate_window, utc_today
from progressive.services.locks import program_lock
from progressive.services.plan_synthesizer import initial_state
from progressive.services.program_store import (
    ensure_planned,
    get_owned_day,
    get_owned_program,
    lock_day_and_program,
)


logger = logging.getLogger(__name__)


def create_program(
    db: Session,
    owner_id: int,
    request: ProgramCreate,
    today: date | None = None,
) -> tuple[Program, int]:
    """
    Create a program and its first rolling window starting today (UTC).

    Args:
        db: Database session
        owner_id: Caller identity
        request: Validated creation parameters
        today: Window start; defaults to the current UTC date

    Returns:
        tuple: (program, number of days generated)
    """
    test_every_weeks = request.test_every_weeks or get_settings().default_test_every_weeks
    schedule = Schedule(
        days_per_week=request.days_per_week,
        preferred_days=list(request.preferred_days),
        test_every_weeks=test_every_weeks,
    )
    state = initial_state(request.method, request.test_max)

    with atomic(db):
        program = Program(
            owner_id=owner_id,
            exercise_key=request.exercise_key,
            method=request.method,
            test_max=request.test_max,
            schedule=dump(schedule),
            state=dump(state),
            active=True,
        )
        db.add(program)
        db.flush()  # Get the program ID

        days_created = generate_window(db, program, schedule, state, today or utc_today())

    logger.info(
        "Created program %s for owner %s: %s/%s test_max=%d days=%d",
        program.id,
        owner_id,
        program.exercise_key,
        program.method,
        program.test_max,
        days_created,
    )
    return program, days_created


def get_program(
    db: Session,
    owner_id: int,
    program_id: str,
    start: date | None = None,
    end: date | None = None,
) -> tuple[Program, list[ProgramDay]]:
    """Return a program with its days from ``start`` (default today) up to ``end``."""
    program = get_owned_program(db, owner_id, program_id)

    query = db.query(ProgramDay).filter(
        ProgramDay.program_id == program.id,
        ProgramDay.date >= (start or utc_today()),
    )
    if end is not None:
        query = query.filter(ProgramDay.date <= end)
    days = query.order_by(ProgramDay.date.asc()).all()
    return program, days


def list_programs(db: Session, owner_id: int) -> list[Program]:
    """All of the owner's programs, active first, newest first within each group."""
    return (
        db.query(Program)
        .filter(Program.owner_id == owner_id)
        .order_by(Program.active.desc(), Program.created_at.desc())
        .all()
    )


def deactivate_program(db: Session, owner_id: int, program_id: str) -> Program:
    """Soft-delete a program. Schedule, days and state are left as they are."""
    get_owned_program(db, owner_id, program_id)

    with program_lock(program_id), atomic(db):
        program = get_owned_program(db, owner_id, program_id, for_update=True)
        program.active = False

    logger.info("Deactivated program %s", program_id)
    return program


def skip_day(db: Session, owner_id: int, day_id: str) -> ProgramDay:
    """Mark a planned day as skipped. State and other plans are untouched."""
    probe = get_owned_day(db, owner_id, day_id)

    with program_lock(probe.program_id), atomic(db):
        day, _ = lock_day_and_program(db, owner_id, day_id)
        ensure_planned(day)
        day.status = STATUS_SKIPPED

    logger.info("Skipped %s day %s of program %s", day.day_type, day.id, day.program_id)
    return day
