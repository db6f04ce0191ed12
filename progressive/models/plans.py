"""Typed payloads stored in the JSON columns: schedules, plans, states and results.

Plans and states are tagged unions discriminated by their ``method`` field so
synthesis and adaptation can dispatch on the concrete variant instead of
poking at untyped dictionaries.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

ExerciseKey = Literal["burpees", "pushups", "pullups"]
Method = Literal["submax", "ladder"]
Weekday = Literal["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# Indexed by date.weekday(), so Monday is 0.
WEEKDAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

DAY_REST = "rest"
DAY_WORKOUT = "workout"
DAY_TEST = "test"

STATUS_PLANNED = "planned"
STATUS_DONE = "done"
STATUS_SKIPPED = "skipped"


# A max-test has to land inside a single 28-day window.
MAX_TEST_EVERY_WEEKS = 4


def check_training_days(preferred_days: list[str], days_per_week: int) -> None:
    """Reject duplicate weekdays and a day count that disagrees with days_per_week."""
    if len(set(preferred_days)) != len(preferred_days):
        raise ValueError("preferred_days must not contain duplicates")
    if len(preferred_days) != days_per_week:
        raise ValueError("preferred_days must contain exactly days_per_week days")


class Schedule(BaseModel):
    """Weekly training days and the max-test cadence of a program."""

    days_per_week: Literal[3, 4]
    preferred_days: list[Weekday]
    test_every_weeks: int = Field(default=4, ge=1, le=MAX_TEST_EVERY_WEEKS)

    @model_validator(mode="after")
    def check_preferred_days(self) -> "Schedule":
        check_training_days(self.preferred_days, self.days_per_week)
        return self


# Plans --------------------------------------------------------------------


class SubmaxSet(BaseModel):
    target_reps: int = Field(ge=1)
    rest_sec: int = Field(ge=0)


class SubmaxPlan(BaseModel):
    """Fixed-rep sets kept a rep or two short of failure."""

    method: Literal["submax"] = "submax"
    exercise_key: ExerciseKey
    sets: list[SubmaxSet]
    notes: str = ""


class Ladder(BaseModel):
    steps: list[int]
    rest_between_steps_sec: int = Field(ge=0)
    rest_between_ladders_sec: int = Field(ge=0)


class LadderPlan(BaseModel):
    """Ascending rep ladders (1, 2, ..., top) without going to failure."""

    method: Literal["ladder"] = "ladder"
    exercise_key: ExerciseKey
    ladders: list[Ladder]
    notes: str = ""


class MaxTestPlan(BaseModel):
    """Unconstrained max-rep test; carries no numeric target."""

    method: Literal["test"] = "test"
    exercise_key: ExerciseKey
    notes: str = ""


Plan = Annotated[Union[SubmaxPlan, LadderPlan, MaxTestPlan], Field(discriminator="method")]
WorkoutPlan = Union[SubmaxPlan, LadderPlan]


# Adaptation state ---------------------------------------------------------


class SubmaxState(BaseModel):
    method: Literal["submax"] = "submax"
    work_reps: int = Field(ge=1)


class LadderState(BaseModel):
    method: Literal["ladder"] = "ladder"
    top: int = Field(ge=3, le=20)


State = Annotated[Union[SubmaxState, LadderState], Field(discriminator="method")]


# Reported results ---------------------------------------------------------


# Only the fields adaptation reads are checked; everything else the caller
# reports, completed_at included, passes through untouched.


class SubmaxSetResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    actual_reps: int = Field(ge=0)


class SubmaxResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    sets: list[SubmaxSetResult] = Field(min_length=1)


class LadderResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    steps: list[Annotated[int, Field(ge=1)]]


WorkoutResult = Union[SubmaxResult, LadderResult]

_PLAN_ADAPTER: TypeAdapter = TypeAdapter(Plan)
_STATE_ADAPTER: TypeAdapter = TypeAdapter(State)
_JSON_ADAPTER: TypeAdapter = TypeAdapter(dict[str, Any])


def load_plan(data: dict | None):
    """Parse a stored plan column into its variant, or None for rest days."""
    if data is None:
        return None
    return _PLAN_ADAPTER.validate_python(data)


def load_state(data: dict):
    """Parse a stored adaptation state column into its variant."""
    return _STATE_ADAPTER.validate_python(data)


def load_schedule(data: dict) -> Schedule:
    return Schedule.model_validate(data)


def dump(model: BaseModel) -> dict:
    """Serialise a payload model for a JSON column."""
    return model.model_dump(mode="json")


def to_json_dict(payload: dict[str, Any]) -> dict[str, Any]:
    """Coerce a caller-supplied mapping into JSON-safe primitives."""
    return _JSON_ADAPTER.dump_python(payload, mode="json")
