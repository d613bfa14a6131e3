"""
stepwise new - Start a plan file.
"""

from pathlib import Path

from stepwise.engine import PlanEngine


def cmd_new(args, engine: PlanEngine, plan_path: Path):
    """Create an empty plan in the analysis phase and write it out."""
    if plan_path.exists() and not args.force:
        print(f"ERROR: {plan_path} already exists. Use --force to replace it.")
        return 1

    plan = engine.create_plan(args.title, goal=args.goal or args.title, description=args.description or "")
    if args.tag:
        plan.metadata.tags.extend(args.tag)
    engine.save_plan(plan_path)

    print(f"Created plan {plan.id}: {plan.title}")
    print(f"  File:  {plan_path}")
    print(f"  Phase: {plan.phase.value}")
    return 0
