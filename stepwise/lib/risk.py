"""
Risk aggregation and rollback-point policy.

A rollback point is a step no other step depends on and whose risk is not
high. This is a heuristic for choosing recovery anchors, not a proof that
stopping there is safe.
"""

from stepwise.lib.types import PlanStep, RiskLevel


def aggregate_risk(steps: list[PlanStep]) -> RiskLevel:
    """Highest risk across the steps, RiskLevel.NONE for an empty plan."""
    highest = RiskLevel.NONE
    for step in steps:
        if step.risk.rank > highest.rank:
            highest = step.risk
    return highest


def high_risk_steps(steps: list[PlanStep]) -> list[PlanStep]:
    return [s for s in steps if s.risk == RiskLevel.HIGH]


def find_rollback_points(steps: list[PlanStep]) -> list[str]:
    """Ids of steps with no dependents and risk below high, in step order."""
    depended_on = set()
    for step in steps:
        depended_on.update(step.dependencies)

    return [
        s.id for s in steps
        if s.id not in depended_on and s.risk != RiskLevel.HIGH
    ]
