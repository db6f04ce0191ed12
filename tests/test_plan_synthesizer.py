"""Tests for plan synthesis and initial state derivation."""
from decimal import Decimal

import pytest

from progressive.models.plans import LadderPlan, LadderState, MaxTestPlan, SubmaxPlan, SubmaxState, dump
from progressive.services.plan_synthesizer import (
    initial_state,
    max_test_plan,
    plan_for_state,
    round_half_up,
)


class TestInitialState:
    """Initial adaptation state from a max-test."""

    @pytest.mark.parametrize(
        "test_max, expected",
        [(12, 8), (20, 14), (1, 1), (2, 1), (15, 11), (100, 70)],
    )
    def test_submax_work_reps(self, test_max, expected):
        state = initial_state("submax", test_max)
        assert isinstance(state, SubmaxState)
        assert state.work_reps == expected

    @pytest.mark.parametrize(
        "test_max, expected",
        [(1, 3), (5, 3), (10, 6), (15, 9), (20, 12), (50, 12)],
    )
    def test_ladder_top(self, test_max, expected):
        state = initial_state("ladder", test_max)
        assert isinstance(state, LadderState)
        assert state.top == expected

    def test_unknown_method_rejected(self):
        with pytest.raises(ValueError):
            initial_state("pyramid", 10)

    def test_round_half_up(self):
        assert round_half_up(Decimal("10.5")) == 11
        assert round_half_up(Decimal("8.4")) == 8
        assert round_half_up(Decimal("0.5")) == 1


class TestWorkoutPlans:
    """Method-specific prescriptions."""

    def test_submax_plan_shape(self):
        plan = plan_for_state("pushups", SubmaxState(work_reps=8))

        assert isinstance(plan, SubmaxPlan)
        assert plan.exercise_key == "pushups"
        assert [s.target_reps for s in plan.sets] == [8, 8, 8, 8, 8]
        assert [s.rest_sec for s in plan.sets] == [90, 90, 90, 90, 120]

    def test_ladder_plan_shape(self):
        plan = plan_for_state("pullups", LadderState(top=5))

        assert isinstance(plan, LadderPlan)
        assert len(plan.ladders) == 1
        ladder = plan.ladders[0]
        assert ladder.steps == [1, 2, 3, 4, 5]
        assert ladder.rest_between_steps_sec == 60
        assert ladder.rest_between_ladders_sec == 120

    def test_same_state_gives_identical_plan(self):
        state = LadderState(top=7)
        assert dump(plan_for_state("burpees", state)) == dump(plan_for_state("burpees", state))

    def test_plan_serialises_with_method_tag(self):
        data = dump(plan_for_state("burpees", SubmaxState(work_reps=3)))
        assert data["method"] == "submax"
        assert data["sets"][0] == {"target_reps": 3, "rest_sec": 90}

    def test_unsupported_state_raises(self):
        with pytest.raises(TypeError):
            plan_for_state("pushups", object())

    def test_max_test_plan_has_no_target(self):
        plan = max_test_plan("burpees")
        assert isinstance(plan, MaxTestPlan)
        data = dump(plan)
        assert data["method"] == "test"
        assert "sets" not in data and "ladders" not in data
