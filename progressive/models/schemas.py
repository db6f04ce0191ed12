"""Pydantic models describing API payloads."""
from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from progressive.models.plans import (
    MAX_TEST_EVERY_WEEKS,
    ExerciseKey,
    Method,
    Schedule,
    Weekday,
    check_training_days,
)


# Program Schemas
class ProgramCreate(BaseModel):
    """Schema for creating a new progressive program."""

    exercise_key: ExerciseKey
    method: Method
    test_max: int = Field(ge=1, le=1000)
    days_per_week: Literal[3, 4]
    preferred_days: list[Weekday]
    test_every_weeks: int | None = Field(default=None, ge=1, le=MAX_TEST_EVERY_WEEKS)

    @field_validator("exercise_key", "method", mode="before")
    @classmethod
    def normalize_key(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("preferred_days", mode="before")
    @classmethod
    def strip_days(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [v.strip() if isinstance(v, str) else v for v in value]
        return value

    @model_validator(mode="after")
    def check_preferred_days(self) -> "ProgramCreate":
        check_training_days(self.preferred_days, self.days_per_week)
        return self


class ProgramResponse(BaseModel):
    """Schema for program API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: int
    exercise_key: str
    method: str
    test_max: int
    schedule: Schedule
    state: dict[str, Any]
    active: bool
    created_at: datetime
    updated_at: datetime


class ProgramDayResponse(BaseModel):
    """Schema for program day API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    program_id: str
    date: date
    day_type: str
    plan: dict[str, Any] | None = None
    status: str
    result: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime


class ProgramCreatedResponse(BaseModel):
    program: ProgramResponse
    days_created: int


class ProgramWithDays(BaseModel):
    """Schema for a program with its upcoming days."""

    program: ProgramResponse
    days: list[ProgramDayResponse] = []


class ProgramListResponse(BaseModel):
    programs: list[ProgramResponse] = []


class TodayResponse(BaseModel):
    """Schema for the "what should I do today" lookup."""

    kind: Literal["program_day", "none"]
    program_day: ProgramDayResponse | None = None
    program: ProgramResponse | None = None


class DayCompletionRequest(BaseModel):
    """Schema for reporting a workout day's result."""

    result: dict[str, Any]


class MaxTestRequest(BaseModel):
    """Schema for reporting a max-test."""

    test_max: int = Field(ge=1, le=1000)


class DayActionResponse(BaseModel):
    """Schema for day state transitions."""

    ok: bool = True
    id: str
    status: str
    decision: str | None = None
    state: dict[str, Any] | None = None
    days_created: int | None = None
