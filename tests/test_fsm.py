"""Tests for stepwise.workflow.fsm module."""

import pytest

from stepwise.lib.types import ExecutionPlan, PlanPhase
from stepwise.workflow.fsm import (
    PlanFSM,
    STATES,
    TRANSITIONS,
    TRIGGER_FOR,
)


def make_plan(phase=PlanPhase.ANALYSIS):
    return ExecutionPlan(id="plan-test", title="Test", description="", goal="Goal", phase=phase)


class TestFSMStates:
    """Tests for FSM state definitions."""

    def test_states_match_phase_enum(self):
        assert set(STATES) == {p.value for p in PlanPhase}

    def test_terminal_states_have_no_outgoing_transitions(self):
        sources = {t["source"] for t in TRANSITIONS}
        assert "completed" not in sources
        assert "cancelled" not in sources

    def test_trigger_lookup_covers_table(self):
        expected = {
            ("analysis", "strategy"), ("analysis", "cancelled"),
            ("strategy", "presentation"), ("strategy", "analysis"), ("strategy", "cancelled"),
            ("presentation", "approval"), ("presentation", "strategy"), ("presentation", "cancelled"),
            ("approval", "execution"), ("approval", "strategy"), ("approval", "cancelled"),
            ("execution", "completed"), ("execution", "cancelled"),
        }
        assert set(TRIGGER_FOR) == expected


class TestFSMBasic:
    """Basic FSM functionality tests."""

    def test_initial_state_from_plan(self):
        fsm = PlanFSM(make_plan(PlanPhase.PRESENTATION))
        assert fsm.state == "presentation"

    def test_transition_updates_plan(self):
        plan = make_plan()
        before = plan.updated_at
        fsm = PlanFSM(plan)
        fsm.define_strategy()
        assert fsm.state == "strategy"
        assert plan.phase == PlanPhase.STRATEGY
        assert plan.updated_at >= before

    def test_full_happy_path(self):
        plan = make_plan()
        fsm = PlanFSM(plan)

        fsm.define_strategy()
        fsm.present()
        fsm.request_approval()
        assert plan.phase == PlanPhase.APPROVAL
        assert plan.approved_at is not None
        assert plan.completed_at is None

        fsm.start_execution()
        fsm.finish()
        assert plan.phase == PlanPhase.COMPLETED
        assert plan.completed_at is not None

    def test_revision_loop(self):
        plan = make_plan(PlanPhase.APPROVAL)
        fsm = PlanFSM(plan)
        fsm.revise_strategy()
        assert plan.phase == PlanPhase.STRATEGY
        fsm.reanalyze()
        assert plan.phase == PlanPhase.ANALYSIS

    def test_available_triggers(self):
        fsm = PlanFSM(make_plan())
        triggers = fsm.get_available_triggers()
        assert "define_strategy" in triggers
        assert "cancel" in triggers
        assert "finish" not in triggers

    def test_can_method(self):
        fsm = PlanFSM(make_plan())
        assert fsm.can("define_strategy") is True
        assert fsm.can("start_execution") is False

    def test_invalid_transition_raises(self):
        fsm = PlanFSM(make_plan())
        with pytest.raises(Exception):  # transitions raises MachineError
            fsm.finish()

    @pytest.mark.parametrize("phase", [PlanPhase.COMPLETED, PlanPhase.CANCELLED])
    def test_terminal_has_no_triggers(self, phase):
        fsm = PlanFSM(make_plan(phase))
        assert fsm.get_available_triggers() == []

    def test_on_transition_callback(self):
        calls = []
        fsm = PlanFSM(make_plan(), on_transition=lambda f, t, trig: calls.append((f, t, trig)))
        fsm.cancel()
        assert calls == [("analysis", "cancelled", "cancel")]
