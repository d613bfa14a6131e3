"""Tests for stepwise.workflow.state_machine module.

Tests the destination-based wrapper around the FSM.
The FSM itself is tested in test_fsm.py.
"""

import pytest

from stepwise.lib.types import ExecutionPlan, PlanPhase
from stepwise.workflow.state_machine import (
    available_phases,
    can_transition,
    is_terminal,
    parse_phase,
    transition_phase,
)


def make_plan(phase=PlanPhase.ANALYSIS):
    return ExecutionPlan(id="plan-test", title="Test", description="", goal="Goal", phase=phase)


class TestParsePhase:
    """Tests for parse_phase()."""

    def test_parse_valid_phase(self):
        assert parse_phase("analysis") == PlanPhase.ANALYSIS
        assert parse_phase("execution") == PlanPhase.EXECUTION

    def test_enum_passthrough(self):
        assert parse_phase(PlanPhase.APPROVAL) == PlanPhase.APPROVAL

    def test_parse_none_and_unknown(self):
        assert parse_phase(None) is None
        assert parse_phase("bogus") is None
        assert parse_phase("") is None


class TestTransitionPhase:
    """Tests for transition_phase()."""

    def test_valid_transition(self):
        plan = make_plan()
        assert transition_phase(plan, "strategy") is True
        assert plan.phase == PlanPhase.STRATEGY

    def test_invalid_transition_returns_false(self):
        plan = make_plan()
        before = plan.updated_at
        assert transition_phase(plan, PlanPhase.EXECUTION) is False
        assert plan.phase == PlanPhase.ANALYSIS
        assert plan.updated_at == before

    def test_self_transition_not_allowed(self):
        plan = make_plan(PlanPhase.STRATEGY)
        assert transition_phase(plan, "strategy") is False

    def test_unknown_phase_returns_false(self, caplog):
        plan = make_plan()
        assert transition_phase(plan, "done") is False
        assert "unknown phase 'done'" in caplog.text

    @pytest.mark.parametrize("terminal", [PlanPhase.COMPLETED, PlanPhase.CANCELLED])
    def test_terminal_phases_reject_everything(self, terminal):
        plan = make_plan(terminal)
        for target in PlanPhase:
            assert transition_phase(plan, target) is False
            assert plan.phase == terminal

    def test_approval_stamps_approved_at(self):
        plan = make_plan(PlanPhase.PRESENTATION)
        assert plan.approved_at is None
        transition_phase(plan, "approval")
        assert plan.approved_at is not None
        assert plan.approved_at == plan.updated_at

    def test_completed_stamps_completed_at(self):
        plan = make_plan(PlanPhase.EXECUTION)
        transition_phase(plan, "completed")
        assert plan.completed_at is not None

    def test_cancel_does_not_stamp_completed(self):
        plan = make_plan(PlanPhase.EXECUTION)
        transition_phase(plan, "cancelled")
        assert plan.completed_at is None

    def test_observer_called(self):
        seen = []
        plan = make_plan()
        transition_phase(plan, "strategy", on_transition=lambda *a: seen.append(a))
        assert seen == [("analysis", "strategy", "define_strategy")]

    def test_observer_not_called_on_rejection(self):
        seen = []
        transition_phase(make_plan(), "completed", on_transition=lambda *a: seen.append(a))
        assert seen == []


class TestQueries:
    """Tests for can_transition(), available_phases() and is_terminal()."""

    def test_can_transition(self):
        plan = make_plan(PlanPhase.APPROVAL)
        assert can_transition(plan, "execution") is True
        assert can_transition(plan, "strategy") is True
        assert can_transition(plan, "analysis") is False
        assert can_transition(plan, "nope") is False

    def test_available_phases(self):
        plan = make_plan(PlanPhase.STRATEGY)
        assert set(available_phases(plan)) == {
            PlanPhase.PRESENTATION, PlanPhase.ANALYSIS, PlanPhase.CANCELLED,
        }

    def test_is_terminal(self):
        assert is_terminal(PlanPhase.COMPLETED)
        assert is_terminal(PlanPhase.CANCELLED)
        assert not is_terminal(PlanPhase.EXECUTION)
