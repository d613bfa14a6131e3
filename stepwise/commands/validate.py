"""
stepwise validate - Check the plan for structural problems.
"""

from pathlib import Path

from stepwise.engine import PlanEngine


def cmd_validate(args, engine: PlanEngine, plan_path: Path):
    result = engine.validate()
    if result.valid:
        print("Plan is valid")
        return 0

    print(f"Plan has {len(result.issues)} issue(s):")
    for issue in result.issues:
        print(f"  - {issue}")
    return 1
