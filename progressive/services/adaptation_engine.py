"""Adaptation of program state from completed workout days."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from fractions import Fraction
from typing import Any

from pydantic import ValidationError
from sqlalchemy.orm import Session

from progressive.database import atomic
from progressive.models.database_models import Program, ProgramDay
from progressive.models.plans import (
    DAY_WORKOUT,
    STATUS_DONE,
    LadderPlan,
    LadderResult,
    LadderState,
    SubmaxPlan,
    SubmaxResult,
    SubmaxState,
    WorkoutPlan,
    WorkoutResult,
    dump,
    load_plan,
    load_state,
    to_json_dict,
)
from progressive.services.exceptions import ProgramValidationError
from progressive.services.locks import program_lock
from progressive.services.plan_synthesizer import LADDER_TOP_MAX, LADDER_TOP_MIN, clamp
from progressive.services.program_store import (
    ensure_planned,
    get_owned_day,
    lock_day_and_program,
    refresh_next_workout,
)


logger = logging.getLogger(__name__)

SUBMAX_INCREASE_RATIO = Fraction(9, 10)
SUBMAX_DECREASE_RATIO = Fraction(7, 10)

DECISION_INCREASE = "increase"
DECISION_DECREASE = "decrease"
DECISION_KEEP = "keep"


@dataclass
class Adaptation:
    """Outcome of applying one result to an adaptation state."""

    state: SubmaxState | LadderState
    decision: str
    ratio: float | None = None


@dataclass
class WorkoutCompletion:
    day: ProgramDay
    program: Program
    adaptation: Adaptation
    next_day: ProgramDay | None


def adapt_submax(
    state: SubmaxState,
    plan: SubmaxPlan | None,
    result: SubmaxResult,
    test_max: int,
) -> Adaptation:
    """
    Move work_reps by one based on how much of the prescribed volume was done.

    Args:
        state: Current submax state
        plan: Prescription the day was assigned (None if it carried none)
        result: Reported sets
        test_max: Upper bound for work_reps

    Returns:
        Adaptation: New state, the decision taken, and the completion ratio
    """
    target_total = sum(s.target_reps for s in plan.sets) if plan is not None else 0
    actual_total = sum(s.actual_reps for s in result.sets)

    if target_total <= 0:
        return Adaptation(state=state, decision=DECISION_KEEP)

    ratio = Fraction(actual_total, target_total)
    work_reps = state.work_reps
    if ratio >= SUBMAX_INCREASE_RATIO:
        decision = DECISION_INCREASE
        work_reps += 1
    elif ratio < SUBMAX_DECREASE_RATIO:
        decision = DECISION_DECREASE
        work_reps -= 1
    else:
        decision = DECISION_KEEP

    new_state = SubmaxState(work_reps=clamp(work_reps, 1, test_max))
    return Adaptation(state=new_state, decision=decision, ratio=float(ratio))


def adapt_ladder(state: LadderState, plan: LadderPlan | None, result: LadderResult) -> Adaptation:
    """Raise the ladder top by one only when the whole prescribed ladder was climbed."""
    prescribed = list(plan.ladders[0].steps) if plan is not None and plan.ladders else []
    if not prescribed:
        return Adaptation(state=state, decision=DECISION_KEEP)

    top = prescribed[-1]
    if result.steps == prescribed:
        return Adaptation(
            state=LadderState(top=clamp(top + 1, LADDER_TOP_MIN, LADDER_TOP_MAX)),
            decision=DECISION_INCREASE,
        )
    return Adaptation(state=state, decision=DECISION_KEEP)


def parse_result(method: str, payload: Any) -> WorkoutResult:
    """Validate a reported result against the program's method."""
    if not isinstance(payload, dict):
        raise ProgramValidationError("Result must be an object", field="result")

    model = SubmaxResult if method == "submax" else LadderResult
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ProgramValidationError(
            f"Malformed {method} result",
            field="result",
            details=exc.errors(include_url=False, include_context=False),
        ) from exc


def adapt(
    state: SubmaxState | LadderState,
    plan: WorkoutPlan | None,
    result: WorkoutResult,
    test_max: int,
) -> Adaptation:
    """Dispatch to the update rule matching the state's method."""
    if isinstance(state, SubmaxState):
        if not isinstance(result, SubmaxResult):
            raise ProgramValidationError("Submax programs need a submax result", field="result")
        return adapt_submax(state, plan if isinstance(plan, SubmaxPlan) else None, result, test_max)
    if isinstance(state, LadderState):
        if not isinstance(result, LadderResult):
            raise ProgramValidationError("Ladder programs need a ladder result", field="result")
        return adapt_ladder(state, plan if isinstance(plan, LadderPlan) else None, result)
    raise TypeError(f"Unsupported adaptation state: {type(state).__name__}")


def stamp_result(payload: dict[str, Any], now: datetime | None = None) -> dict[str, Any]:
    """Copy the caller's result, adding ``completed_at`` when it was left out."""
    stored = to_json_dict(payload)
    if not stored.get("completed_at"):
        stored["completed_at"] = (now or datetime.now(timezone.utc)).isoformat()
    return stored


def complete_workout_day(
    db: Session,
    owner_id: int,
    day_id: str,
    payload: Any,
    now: datetime | None = None,
) -> WorkoutCompletion:
    """
    Record a workout result, adapt the program state and refresh the next workout.

    The day status, the stored result, the new state and the refreshed plan
    are committed together or not at all.

    Raises:
        NotFoundError: Day missing or owned by someone else
        StateConflictError: Day already handled, or not a workout day
        ProgramValidationError: Result payload does not fit the method
    """
    probe = get_owned_day(db, owner_id, day_id)

    with program_lock(probe.program_id), atomic(db):
        day, program = lock_day_and_program(db, owner_id, day_id)
        ensure_planned(day, DAY_WORKOUT)
        result = parse_result(program.method, payload)

        state = load_state(program.state)
        adaptation = adapt(state, load_plan(day.plan), result, program.test_max)

        day.status = STATUS_DONE
        day.result = stamp_result(payload, now)
        program.state = dump(adaptation.state)
        next_day = refresh_next_workout(db, program, day.date, adaptation.state)

    logger.info(
        "Completed workout day %s of program %s: decision=%s ratio=%s state=%s next_day=%s",
        day.id,
        program.id,
        adaptation.decision,
        adaptation.ratio,
        program.state,
        next_day.id if next_day is not None else None,
    )
    return WorkoutCompletion(day=day, program=program, adaptation=adaptation, next_day=next_day)
