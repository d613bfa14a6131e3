"""Tests for stepwise.lib.render module."""

from datetime import datetime, timezone

import pytest

from stepwise.engine import PlanEngine
from stepwise.lib.render import render_markdown, render_summary
from stepwise.lib.types import ActionType, StepAction, StepDraft


@pytest.fixture
def engine():
    engine = PlanEngine()
    plan = engine.create_plan("Refactor auth", goal="Simplify login", description="Auth cleanup")
    plan.created_at = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
    first = engine.add_step(StepDraft(
        title="Extract store",
        description="Pull sessions out",
        priority="high",
        risk="medium",
        estimated_complexity=3,
        affected_files=["auth/session.py", "auth/store.py"],
        actions=[StepAction(ActionType.MODIFY_FILE, "auth/session.py", "Remove globals")],
    ))
    engine.add_step(StepDraft(title="Update views", dependencies=[first.id, "step-ghost"]))
    engine.update_step_status(first.id, "completed")
    return engine


class TestRenderSummary:
    """Tests for render_summary()."""

    def test_header_and_border(self, engine):
        text = render_summary(engine.get_plan())
        lines = text.splitlines()
        assert lines[0] == "=" * 60
        assert lines[1] == "EXECUTION PLAN: Refactor auth"
        assert lines[-1] == "=" * 60
        assert "Goal:    Simplify login" in text
        assert "Phase:   ANALYSIS" in text
        assert "Created: 2026-03-01 09:30:00 UTC" in text

    def test_analysis_metrics(self, engine):
        text = render_summary(engine.get_plan())
        assert "Total Steps:          2" in text
        assert "Total Files Affected: 2" in text
        assert "Estimated Complexity: 4" in text
        assert "Risk Assessment:      MEDIUM" in text

    def test_steps(self, engine):
        text = render_summary(engine.get_plan())
        assert "1. [x] Extract store [MEDIUM RISK]" in text
        assert "   Priority: high | Complexity: 3" in text
        assert "   Files: auth/session.py, auth/store.py" in text
        assert "2. [ ] Update views\n" in text
        assert "   Depends on: Extract store, step-ghost" in text

    def test_critical_path_by_title(self, engine):
        text = render_summary(engine.get_plan())
        assert "CRITICAL PATH" in text
        assert "Extract store -> Update views" in text

    def test_empty_plan_has_no_critical_path(self):
        engine = PlanEngine()
        engine.create_plan("Empty", "Nothing")
        assert "CRITICAL PATH" not in render_summary(engine.get_plan())

    def test_pure(self, engine):
        plan = engine.get_plan()
        assert render_summary(plan) == render_summary(plan)


class TestRenderMarkdown:
    """Tests for render_markdown()."""

    def test_heading_and_table(self, engine):
        text = render_markdown(engine.get_plan())
        assert text.startswith("# Refactor auth\n")
        assert "> Auth cleanup" in text
        assert "**Created:** 2026-03-01T09:30:00+00:00" in text
        assert "| Total Steps | 2 |" in text
        assert "| Risk | medium |" in text

    def test_checkboxes_follow_completion(self, engine):
        text = render_markdown(engine.get_plan())
        assert "### 1. [x] Extract store" in text
        assert "### 2. [ ] Update views" in text

    def test_step_metadata_and_actions(self, engine):
        text = render_markdown(engine.get_plan())
        assert "- **Complexity:** 3/5" in text
        assert "- **Files:** `auth/session.py`, `auth/store.py`" in text
        assert "**Actions:**" in text
        assert "- modify_file: auth/session.py - Remove globals" in text

    def test_engine_delegates(self, engine):
        assert engine.generate_markdown() == render_markdown(engine.get_plan())
        assert engine.generate_summary() == render_summary(engine.get_plan())
