"""Tests for stepwise.lib.risk and stepwise.lib.analysis modules."""

from stepwise.lib.analysis import analyze, refresh_analysis
from stepwise.lib.risk import aggregate_risk, find_rollback_points, high_risk_steps
from stepwise.lib.types import ExecutionPlan, PlanStep, Priority, RiskLevel


def make_step(step_id, deps=(), risk=RiskLevel.NONE, files=(), complexity=1):
    return PlanStep(
        id=step_id,
        title=step_id.upper(),
        description="",
        priority=Priority.MEDIUM,
        risk=risk,
        estimated_complexity=complexity,
        dependencies=list(deps),
        affected_files=list(files),
    )


class TestAggregateRisk:
    """Tests for aggregate_risk()."""

    def test_empty_is_none(self):
        assert aggregate_risk([]) == RiskLevel.NONE

    def test_maximum_wins(self):
        steps = [make_step("a", risk=RiskLevel.LOW), make_step("b", risk=RiskLevel.MEDIUM), make_step("c")]
        assert aggregate_risk(steps) == RiskLevel.MEDIUM

    def test_high(self):
        steps = [make_step("a", risk=RiskLevel.HIGH), make_step("b", risk=RiskLevel.LOW)]
        assert aggregate_risk(steps) == RiskLevel.HIGH

    def test_rank_ordering(self):
        ranks = [r.rank for r in (RiskLevel.NONE, RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH)]
        assert ranks == sorted(ranks)


class TestRollbackPoints:
    """Tests for find_rollback_points()."""

    def test_leaves_without_dependents(self):
        steps = [make_step("a"), make_step("b", ["a"]), make_step("c", ["a"])]
        assert find_rollback_points(steps) == ["b", "c"]

    def test_high_risk_excluded(self):
        steps = [make_step("a", risk=RiskLevel.HIGH)]
        assert find_rollback_points(steps) == []

    def test_single_step_is_rollback_point(self):
        assert find_rollback_points([make_step("a", risk=RiskLevel.MEDIUM)]) == ["a"]

    def test_high_risk_steps(self):
        steps = [make_step("a", risk=RiskLevel.HIGH), make_step("b")]
        assert [s.id for s in high_risk_steps(steps)] == ["a"]


class TestAnalyze:
    """Tests for analyze()."""

    def test_empty(self):
        analysis = analyze([])
        assert analysis.total_steps == 0
        assert analysis.total_files == 0
        assert analysis.estimated_complexity == 0
        assert analysis.risk_assessment == RiskLevel.NONE
        assert analysis.critical_path == []
        assert analysis.parallelizable_groups == []
        assert analysis.rollback_points == []

    def test_metrics(self):
        steps = [
            make_step("a", files=["x.py", "y.py"], complexity=2),
            make_step("b", ["a"], files=["y.py", "z.py"], complexity=3, risk=RiskLevel.LOW),
            make_step("c", ["a"], complexity=1),
        ]
        analysis = analyze(steps)
        assert analysis.total_steps == 3
        assert analysis.total_files == 3
        assert analysis.estimated_complexity == 6
        assert analysis.risk_assessment == RiskLevel.LOW
        assert analysis.critical_path == ["a", "b"]
        assert analysis.parallelizable_groups == [["b", "c"]]
        assert analysis.rollback_points == ["b", "c"]

    def test_refresh_stores_on_plan(self):
        plan = ExecutionPlan(id="plan-1", title="T", description="", goal="G", steps=[make_step("a")])
        analysis = refresh_analysis(plan)
        assert plan.analysis is analysis
        assert plan.analysis.total_steps == 1
