"""Turns adaptation state into concrete workout and test prescriptions.

Everything here is a pure function of its arguments: the same exercise and
state always produce the same plan.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from progressive.models.plans import (
    Ladder,
    LadderPlan,
    LadderState,
    MaxTestPlan,
    SubmaxPlan,
    SubmaxSet,
    SubmaxState,
    WorkoutPlan,
)

SUBMAX_REST_SEC: tuple[int, ...] = (90, 90, 90, 90, 120)
SUBMAX_INITIAL_FRACTION = Decimal("0.7")

LADDER_REST_BETWEEN_STEPS_SEC = 60
LADDER_REST_BETWEEN_LADDERS_SEC = 120
LADDER_INITIAL_FRACTION = Decimal("0.6")
LADDER_TOP_MIN = 3
LADDER_TOP_MAX = 20
LADDER_INITIAL_TOP_MAX = 12

SUBMAX_NOTES = "Submax volume. Stop 1-2 reps before failure."
LADDER_NOTES = "Ladder. No failure, clean form."
TEST_NOTES = "Max test: as many reps as you can with good form, then log the result."


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer with .5 going up (10.5 -> 11)."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def initial_state(method: str, test_max: int) -> SubmaxState | LadderState:
    """Derive a fresh adaptation state from a max-test result."""
    if method == "submax":
        work_reps = round_half_up(Decimal(test_max) * SUBMAX_INITIAL_FRACTION)
        return SubmaxState(work_reps=clamp(work_reps, 1, test_max))
    if method == "ladder":
        top = round_half_up(Decimal(test_max) * LADDER_INITIAL_FRACTION)
        return LadderState(top=clamp(top, LADDER_TOP_MIN, LADDER_INITIAL_TOP_MAX))
    raise ValueError(f"Unknown progression method: {method!r}")


def submax_plan(exercise_key: str, work_reps: int) -> SubmaxPlan:
    return SubmaxPlan(
        exercise_key=exercise_key,
        sets=[SubmaxSet(target_reps=work_reps, rest_sec=rest) for rest in SUBMAX_REST_SEC],
        notes=SUBMAX_NOTES,
    )


def ladder_plan(exercise_key: str, top: int) -> LadderPlan:
    return LadderPlan(
        exercise_key=exercise_key,
        ladders=[
            Ladder(
                steps=list(range(1, top + 1)),
                rest_between_steps_sec=LADDER_REST_BETWEEN_STEPS_SEC,
                rest_between_ladders_sec=LADDER_REST_BETWEEN_LADDERS_SEC,
            )
        ],
        notes=LADDER_NOTES,
    )


def max_test_plan(exercise_key: str) -> MaxTestPlan:
    return MaxTestPlan(exercise_key=exercise_key, notes=TEST_NOTES)


def plan_for_state(exercise_key: str, state: SubmaxState | LadderState) -> WorkoutPlan:
    """Build the workout prescription for the given adaptation state."""
    if isinstance(state, SubmaxState):
        return submax_plan(exercise_key, state.work_reps)
    if isinstance(state, LadderState):
        return ladder_plan(exercise_key, state.top)
    raise TypeError(f"Unsupported adaptation state: {type(state).__name__}")
