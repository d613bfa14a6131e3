"""
Plan analysis.

The analysis is always rebuilt from scratch from the current steps; it is
never patched incrementally.
"""

import logging

from stepwise.lib import graph
from stepwise.lib.risk import aggregate_risk, find_rollback_points
from stepwise.lib.types import ExecutionPlan, PlanAnalysis, PlanStep

logger = logging.getLogger(__name__)


def analyze(steps: list[PlanStep]) -> PlanAnalysis:
    """Derive the analysis for a list of steps."""
    files = set()
    for step in steps:
        files.update(step.affected_files)

    return PlanAnalysis(
        total_steps=len(steps),
        total_files=len(files),
        estimated_complexity=sum(s.estimated_complexity for s in steps),
        risk_assessment=aggregate_risk(steps),
        critical_path=graph.critical_path(steps),
        parallelizable_groups=graph.parallel_groups(steps),
        rollback_points=find_rollback_points(steps),
    )


def refresh_analysis(plan: ExecutionPlan) -> PlanAnalysis:
    """Recompute and store the plan's analysis."""
    plan.analysis = analyze(plan.steps)
    logger.debug(
        f"[PLAN] {plan.id}: analysis refreshed "
        f"({plan.analysis.total_steps} steps, risk {plan.analysis.risk_assessment.value})"
    )
    return plan.analysis
