"""Max-test completion: re-base the program and extend its schedule."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from progressive.database import atomic
from progressive.models.database_models import Program, ProgramDay
from progressive.models.plans import DAY_TEST, STATUS_DONE, LadderState, SubmaxState, dump, load_schedule
from progressive.services.day_generator import generate_window
from progressive.services.exceptions import ProgramValidationError
from progressive.services.locks import program_lock
from progressive.services.plan_synthesizer import initial_state
from progressive.services.program_store import (
    ensure_planned,
    get_owned_day,
    lock_day_and_program,
    refresh_next_workout,
)


logger = logging.getLogger(__name__)

TEST_MAX_LIMIT = 1000


@dataclass
class RebaseOutcome:
    day: ProgramDay
    program: Program
    state: SubmaxState | LadderState
    days_created: int
    next_day: ProgramDay | None


def validate_test_max(test_max) -> int:
    if isinstance(test_max, bool) or not isinstance(test_max, int):
        raise ProgramValidationError("test_max must be an integer", field="test_max")
    if not 1 <= test_max <= TEST_MAX_LIMIT:
        raise ProgramValidationError(
            f"test_max must be between 1 and {TEST_MAX_LIMIT}", field="test_max"
        )
    return test_max


def complete_test_day(
    db: Session,
    owner_id: int,
    day_id: str,
    test_max: int,
    now: datetime | None = None,
) -> RebaseOutcome:
    """
    Record a max-test and rebuild the program from it.

    The prior adaptation state is discarded, not blended: the new state comes
    from the same formulas used at program creation. A fresh window starts the
    day after the test; dates that already have a row keep it.

    Raises:
        NotFoundError: Day missing or owned by someone else
        StateConflictError: Day already handled, or not a test day
        ProgramValidationError: test_max outside 1..1000
    """
    test_max = validate_test_max(test_max)
    probe = get_owned_day(db, owner_id, day_id)

    with program_lock(probe.program_id), atomic(db):
        day, program = lock_day_and_program(db, owner_id, day_id)
        ensure_planned(day, DAY_TEST)

        state = initial_state(program.method, test_max)
        completed_at = (now or datetime.now(timezone.utc)).isoformat()

        day.status = STATUS_DONE
        day.result = {"test_max": test_max, "completed_at": completed_at}
        program.test_max = test_max
        program.state = dump(state)

        schedule = load_schedule(program.schedule)
        days_created = generate_window(db, program, schedule, state, day.date + timedelta(days=1))
        next_day = refresh_next_workout(db, program, day.date, state)

    logger.info(
        "Re-based program %s from test day %s: test_max=%d state=%s days_created=%d",
        program.id,
        day.id,
        test_max,
        program.state,
        days_created,
    )
    return RebaseOutcome(
        day=day,
        program=program,
        state=state,
        days_created=days_created,
        next_day=next_day,
    )
