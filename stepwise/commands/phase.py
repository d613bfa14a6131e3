"""
stepwise phase - Move the plan through its lifecycle.
"""

from pathlib import Path

from stepwise.engine import PlanEngine
from stepwise.lib.types import PlanPhase
from stepwise.workflow.state_machine import available_phases, parse_phase


def cmd_phase(args, engine: PlanEngine, plan_path: Path):
    """Show the current phase, or transition to a new one.

    Entering approval runs the validator first and refuses to continue on
    issues unless --force is given.
    """
    plan = engine.get_plan()

    if not args.target:
        options = ", ".join(p.value for p in available_phases(plan)) or "(none - terminal)"
        print(f"Phase: {plan.phase.value}")
        print(f"Next:  {options}")
        return 0

    target = parse_phase(args.target)
    if target is None:
        valid = ", ".join(p.value for p in PlanPhase)
        print(f"ERROR: Unknown phase '{args.target}' (expected one of: {valid})")
        return 2

    if target == PlanPhase.APPROVAL and not args.force:
        result = engine.validate()
        if not result.valid:
            print("ERROR: Plan has issues; fix them or use --force:")
            for issue in result.issues:
                print(f"  - {issue}")
            return 1

    previous = plan.phase
    if not engine.transition_phase(target):
        print(f"ERROR: Cannot move from {previous.value} to {target.value}")
        return 1

    engine.save_plan(plan_path)
    print(f"Phase: {previous.value} -> {target.value}")
    return 0
