"""Tests for program lifecycle operations."""
from datetime import date, datetime, timedelta

import pytest
from pydantic import ValidationError

from progressive.models.database_models import Program, ProgramDay
from progressive.models.plans import Schedule
from progressive.models.schemas import ProgramCreate
from progressive.services.exceptions import NotFoundError, StateConflictError
from progressive.services.program_service import (
    create_program,
    deactivate_program,
    get_program,
    list_programs,
    skip_day,
)

from conftest import WINDOW_START


def _request(**overrides) -> dict:
    data = {
        "exercise_key": "pushups",
        "method": "submax",
        "test_max": 12,
        "days_per_week": 3,
        "preferred_days": ["Mon", "Wed", "Fri"],
    }
    data.update(overrides)
    return data


class TestProgramCreateValidation:
    """Creation requests are rejected before anything is stored."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"exercise_key": "squats"},
            {"method": "pyramid"},
            {"test_max": 0},
            {"test_max": 1001},
            {"days_per_week": 5},
            {"preferred_days": ["Mon", "Wed"]},
            {"preferred_days": ["Mon", "Mon", "Fri"]},
            {"preferred_days": ["Mon", "Wed", "Funday"]},
            {"days_per_week": 4, "preferred_days": ["Mon", "Wed", "Fri"]},
            {"test_every_weeks": 0},
            {"test_every_weeks": 5},
            {"test_every_weeks": 12},
        ],
    )
    def test_invalid_requests(self, overrides):
        with pytest.raises(ValidationError):
            ProgramCreate(**_request(**overrides))

    def test_keys_are_normalised(self):
        request = ProgramCreate(**_request(exercise_key=" PushUps ", method="LADDER", preferred_days=[" Mon", "Wed ", "Fri"]))
        assert request.exercise_key == "pushups"
        assert request.method == "ladder"
        assert request.preferred_days == ["Mon", "Wed", "Fri"]

    @pytest.mark.parametrize(
        "days_per_week, preferred_days",
        [
            (3, ["Mon", "Mon", "Fri"]),
            (3, ["Mon", "Wed"]),
            (4, ["Mon", "Wed", "Fri"]),
            (3, ["Mon", "Tue", "Thu", "Sat"]),
        ],
    )
    def test_request_and_stored_schedule_reject_the_same_days(self, days_per_week, preferred_days):
        with pytest.raises(ValidationError):
            ProgramCreate(**_request(days_per_week=days_per_week, preferred_days=preferred_days))
        with pytest.raises(ValidationError):
            Schedule(days_per_week=days_per_week, preferred_days=preferred_days)

    def test_four_day_schedule(self):
        request = ProgramCreate(**_request(days_per_week=4, preferred_days=["Mon", "Tue", "Thu", "Sat"]))
        assert request.days_per_week == 4


def test_create_program_stores_schedule_and_state(db_session):
    program, days_created = create_program(db_session, 7, ProgramCreate(**_request()), today=WINDOW_START)

    assert days_created == 28
    assert program.owner_id == 7
    assert program.active is True
    assert program.state == {"method": "submax", "work_reps": 8}
    assert program.schedule == {
        "days_per_week": 3,
        "preferred_days": ["Mon", "Wed", "Fri"],
        "test_every_weeks": 4,
    }


def test_create_program_with_custom_test_interval(db_session):
    program, _ = create_program(
        db_session, 7, ProgramCreate(**_request(test_every_weeks=2)), today=WINDOW_START
    )

    test_days = (
        db_session.query(ProgramDay)
        .filter(ProgramDay.program_id == program.id, ProgramDay.day_type == "test")
        .all()
    )
    assert [d.date for d in test_days] == [WINDOW_START + timedelta(days=13)]


def test_get_program_returns_days_from_start(db_session, make_program):
    program = make_program()

    fetched, days = get_program(db_session, 1, program.id, start=date(2026, 11, 1))

    assert fetched.id == program.id
    assert days[0].date == date(2026, 11, 1)
    assert len(days) == 15
    assert [d.date for d in days] == sorted(d.date for d in days)


def test_get_program_date_range(db_session, make_program):
    program = make_program()

    _, days = get_program(db_session, 1, program.id, start=date(2026, 10, 19), end=date(2026, 10, 25))

    assert len(days) == 7


def test_get_program_of_other_owner(db_session, make_program):
    program = make_program(owner_id=1)

    with pytest.raises(NotFoundError):
        get_program(db_session, 2, program.id)


def test_list_programs_active_first_then_newest(db_session, make_program):
    first = make_program(exercise_key="pushups")
    second = make_program(exercise_key="pullups")
    third = make_program(exercise_key="burpees")
    for program, created in ((first, datetime(2026, 1, 1)), (second, datetime(2026, 2, 1)), (third, datetime(2026, 3, 1))):
        db_session.query(Program).filter(Program.id == program.id).update({"created_at": created})
    db_session.commit()
    deactivate_program(db_session, 1, third.id)

    programs = list_programs(db_session, 1)

    assert [p.id for p in programs] == [second.id, first.id, third.id]


def test_deactivate_leaves_schedule_and_state(db_session, make_program):
    program = make_program()
    state_before = dict(program.state)

    deactivate_program(db_session, 1, program.id)

    db_session.expire_all()
    program = db_session.get(Program, program.id)
    assert program.active is False
    assert program.state == state_before
    assert db_session.query(ProgramDay).filter(ProgramDay.program_id == program.id).count() == 28


def test_deactivate_other_owner(db_session, make_program):
    program = make_program(owner_id=1)

    with pytest.raises(NotFoundError):
        deactivate_program(db_session, 3, program.id)


def test_skip_day_is_terminal(db_session, make_program):
    program = make_program()
    day = (
        db_session.query(ProgramDay)
        .filter(ProgramDay.program_id == program.id, ProgramDay.date == WINDOW_START)
        .one()
    )
    next_plan = (
        db_session.query(ProgramDay)
        .filter(ProgramDay.program_id == program.id, ProgramDay.date == date(2026, 10, 21))
        .one()
        .plan
    )

    skipped = skip_day(db_session, 1, day.id)
    assert skipped.status == "skipped"
    assert skipped.result is None

    with pytest.raises(StateConflictError):
        skip_day(db_session, 1, day.id)

    db_session.expire_all()
    assert db_session.get(Program, program.id).state == {"method": "submax", "work_reps": 8}
    assert (
        db_session.query(ProgramDay)
        .filter(ProgramDay.program_id == program.id, ProgramDay.date == date(2026, 10, 21))
        .one()
        .plan
        == next_plan
    )


def test_skip_test_day(db_session, make_program):
    program = make_program()
    test_day = (
        db_session.query(ProgramDay)
        .filter(ProgramDay.program_id == program.id, ProgramDay.day_type == "test")
        .one()
    )

    assert skip_day(db_session, 1, test_day.id).status == "skipped"


def test_skip_unknown_day(db_session):
    with pytest.raises(NotFoundError):
        skip_day(db_session, 1, "00000000-0000-0000-0000-000000000000")
